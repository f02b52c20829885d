"""
GSA 客户端 - OneBox 解析单元测试
"""
from ..core.response_parser import parse_response


class TestOneBox:
    """测试 OneBox 模块的解析"""

    def test_module_count(self, onebox_xml):
        response = parse_response(onebox_xml)

        assert len(response.results) == 2
        assert len(response.one_box_responses) == 2

    def test_module_header_is_stripped(self, onebox_xml):
        """模块标题、链接、图片与提供方的首尾空白被去掉"""
        directory = parse_response(onebox_xml).one_box_responses[0]

        assert directory.image_source == "http://directory.corp.acme.com/images/directory.jpg"
        assert directory.provider_name == "ACME Employee Directory"
        assert directory.title_link == "http://directory.corp.acme.com/cgi-bin/search?machine%20amazement"
        assert directory.title_text == "13 results in The ACME directory"

    def test_module_results(self, onebox_xml):
        # Arrange
        telephone = parse_response(onebox_xml).one_box_responses[1]

        # Act
        first = telephone.module_results[0]
        entries = {entry.key: entry.value for entry in first.field_entries}

        # Assert
        assert telephone.provider_name == "ACME Telephone Directory"
        assert telephone.title_text == "2 results in The ACME Telephone directory"
        assert len(telephone.module_results) == 2
        assert entries["display"] == "Turner, John"
        assert entries["firstname"] == "John"
        assert entries["picture"] == "http://telephone.corp.acme.com/cqi-bin/lookup?photo=448478"

    def test_repeated_field_keys(self, onebox_xml):
        """同一个键出现多次时全部保留，顺序不变"""
        first = parse_response(onebox_xml).one_box_responses[1].module_results[0]

        assert first.get_field_values("phone") == ["x1234", "x5678"]
        assert first.get_field_values("missing") == []
        assert [entry.key for entry in first.field_entries] == [
            "display", "firstname", "picture", "phone", "phone"
        ]

    def test_module_result_outside_module(self):
        """OBRES 之外的 MODULE_RESULT 被忽略"""
        response = parse_response(
            b"<GSP><MODULE_RESULT><U>http://x/</U></MODULE_RESULT><OBRES></OBRES></GSP>"
        )

        assert len(response.one_box_responses) == 1
        assert response.one_box_responses[0].module_results == []
