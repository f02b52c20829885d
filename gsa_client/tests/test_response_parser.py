"""
GSA 客户端 - 响应解析器单元测试
"""
import io
import logging

import pytest

from .conftest import build_results_xml
from ..core.exceptions import ParsingError
from ..core.response_parser import ResponseParser, parse_response

SYSTEM_ID = "http://gsa.host.url/"


def _parse(xml):
    return ResponseParser(SYSTEM_ID).parse(xml)


class TestSimpleResponse:
    """测试普通结果列表"""

    def test_simple10(self, simple10_xml):
        # Act
        response = _parse(simple10_xml)

        # Assert
        assert len(response.results) == 10
        assert response.next_response_url == (
            "/search?q=machine+amazement&num=100&hl=en&lr=&ie=UTF-8&output=xml&access=p&start=10&sa=N"
        )
        assert response.previous_response_url == (
            "/search?q=machine+amazement&num=100&hl=en&lr=&ie=UTF-8&output=xml&access=p&start=0&sa=N"
        )
        assert response.one_box_responses == []

    def test_top_level_fields(self, simple10_xml):
        response = _parse(simple10_xml)

        assert response.search_time == pytest.approx(0.052061)
        assert response.query == "machine amazement"
        assert response.start_index == 1
        assert response.end_index == 10
        assert response.num_results == 2340
        assert response.is_filtered is True
        assert response.params["num"] == "100"
        assert response.params["lr"] == ""

    def test_result_fields(self, simple10_xml):
        response = _parse(simple10_xml)
        first, second = response.results[0], response.results[1]

        assert first.url == "http://blue.none.url/posts/comp.htm"
        assert first.escaped_url == "http://blue.none.url/posts/comp.htm"
        assert first.title == "Machine <b>amazement</b> post 1"
        assert first.rating == 10
        assert first.mime_type == "text/html"
        assert first.language == "en"
        assert first.summary.startswith("The <b>machine</b>")
        assert first.indentation == 1
        assert second.indentation == 2

    def test_keymatch(self, simple10_xml):
        response = _parse(simple10_xml)

        assert len(response.keymatch_results) == 1
        assert response.keymatch_results[0].url == "http://www.google.com/"
        assert response.keymatch_results[0].description == "Description 1"

    def test_cache_document_attributes(self, simple10_xml):
        """缓存属性：缺失的 C 元素、空编码与空大小"""
        results = _parse(simple10_xml).results

        assert results[0].cache_doc_encoding == "ISO-8859-1"
        assert results[0].cache_doc_id == "OjydvtGXC1sJ"
        assert results[0].cache_doc_size == "23k"

        assert results[7].cache_doc_encoding is None
        assert results[7].cache_doc_id is None
        assert results[7].cache_doc_size is None

        assert results[9].cache_doc_encoding == "UTF-8"
        assert results[9].cache_doc_id == "DOIf-6LmKBwJ"
        assert results[9].cache_doc_size == ""

    def test_parse_is_deterministic(self, simple10_xml):
        """同一份输入用两个解析器解析，结果相同"""
        assert _parse(simple10_xml) == _parse(simple10_xml)

    @pytest.mark.parametrize("count", [0, 1, 100])
    def test_generated_result_counts(self, count):
        # Act
        response = parse_response(build_results_xml(count))

        # Assert
        assert len(response.results) == count
        assert response.num_results == count
        assert [r.url for r in response.results] == [
            f"http://blue.none.url/doc{i}.htm" for i in range(1, count + 1)
        ]


class TestMetaAndFields:
    """测试 meta 标签与附加字段"""

    def test_metas(self, meta_xml):
        result = _parse(meta_xml).results[0]

        assert result.metas == {"COMP_NAME": "blurb", "HQ": "Somewhere - Around"}
        assert result.get_meta("COMP_NAME") == "blurb"
        assert result.get_meta("missing") is None

    def test_fields(self, meta_xml):
        result = _parse(meta_xml).results[0]

        assert result.fields == {"date": ""}
        assert result.get_field("date") == ""

    def test_results_do_not_share_maps(self, meta_xml):
        """每条结果的 metas / fields 相互独立"""
        results = _parse(meta_xml).results

        assert results[1].metas == {}
        assert results[1].fields == {"date": "2011-03-04"}
        assert results[1].summary == ""

    def test_declared_encoding(self, meta_xml):
        """按文档声明的编码解码"""
        assert "Café" in _parse(meta_xml).results[0].summary


class TestSpellingAndSynonyms:
    """测试拼写建议与同义词"""

    def test_suggestion(self, suggestions_xml):
        suggestion = _parse(suggestions_xml).spelling.suggestions[0]

        assert suggestion.text == "music art instrumental"
        assert suggestion.text_with_markup == "<b><i>music</i></b> art <b><i>instrumental</i></b>"

    def test_synonyms(self, suggestions_xml):
        assert _parse(suggestions_xml).synonyms_with_markup == ["car", "truck"]

    def test_results_unaffected(self, suggestions_xml):
        """拼写与同义词块不影响结果列表"""
        response = _parse(suggestions_xml)

        assert len(response.results) == 1
        assert response.results[0].cache_doc_id == "OjydvtGXC1sJ"

    def test_no_spelling_block(self, simple10_xml):
        response = _parse(simple10_xml)

        assert response.spelling is None
        assert response.synonyms_with_markup == []


class TestDynamicNavigation:
    """测试动态导航"""

    def test_department_attribute(self, navigation_xml):
        attributes = _parse(navigation_xml).navigation_response.results
        department = attributes[0]

        assert department.name == "dept"
        assert department.label == "Department"
        assert department.type == 0
        assert department.is_range is False

        sales = department.results[0]
        assert sales.value == "Sales"
        assert sales.count == 8
        assert sales.low_range == ""
        assert sales.high_range == ""

    def test_empty_count_is_zero(self, navigation_xml):
        engineering = _parse(navigation_xml).navigation_response.results[0].results[1]

        assert engineering.value == "Engineering"
        assert engineering.count == 0

    def test_range_attribute(self, navigation_xml):
        date_attribute = _parse(navigation_xml).navigation_response.results[1]

        assert date_attribute.name == "join-date"
        assert date_attribute.label == "Join Date"
        assert date_attribute.type == 4
        assert date_attribute.is_range is True

        bucket = date_attribute.results[1]
        assert bucket.value == ""
        assert bucket.count == 790
        assert bucket.low_range == "2011-01-01"
        assert bucket.high_range == "2012-01-01"

    def test_missing_attributes_use_defaults(self, navigation_xml):
        """IR、T、C 缺失时取默认值"""
        office = _parse(navigation_xml).navigation_response.results[2]

        assert office.is_range is False
        assert office.type == 0
        assert office.results[0].count == 0

    def test_results_follow_navigation(self, navigation_xml):
        response = _parse(navigation_xml)

        assert len(response.navigation_response.results) == 3
        assert len(response.results) == 1
        assert response.results[0].title == "Jane Doe"

    def test_no_navigation_block(self, simple10_xml):
        assert _parse(simple10_xml).navigation_response.results == []


class TestEdgeCases:
    """测试默认值与异常输入"""

    def test_missing_res_attributes_default_to_one(self):
        response = parse_response(b"<GSP><RES><M>0</M></RES></GSP>")

        assert response.start_index == 1
        assert response.end_index == 1

    def test_empty_res_attributes_default_to_one(self):
        response = parse_response(b'<GSP><RES SN="" EN=""></RES></GSP>')

        assert response.start_index == 1
        assert response.end_index == 1

    def test_no_res_element(self):
        response = parse_response(b"<GSP><TM>0.5</TM><Q>nothing</Q></GSP>")

        assert response.start_index == 0
        assert response.end_index == 0
        assert response.results == []
        assert response.query == "nothing"
        assert response.is_filtered is False

    def test_unknown_elements_are_ignored(self):
        """未知元素及其内部文本不影响已知字段"""
        # Arrange
        xml = (
            b'<GSP><CUSTOM a="1">ignored</CUSTOM><Q>right</Q>'
            b'<RES SN="1" EN="1"><R><U>http://a/</U><EXTRA>x</EXTRA><T>title</T></R></RES></GSP>'
        )

        # Act
        response = parse_response(xml)

        # Assert
        assert response.results[0].url == "http://a/"
        assert response.results[0].title == "title"
        assert response.query == "right"

    def test_result_outside_res_is_ignored(self):
        """RES 之外的 R 不会生成结果"""
        response = parse_response(b"<GSP><R><U>http://a/</U></R><RES></RES></GSP>")

        assert response.results == []

    def test_nested_result_is_ignored(self):
        """R 内部再次出现 R 时，内层元素不开启新的结果"""
        xml = b"<GSP><RES><R><U>http://outer/</U><R><T>inner</T></R></R></RES></GSP>"

        response = parse_response(xml)

        assert len(response.results) == 1
        assert response.results[0].url == "http://outer/"
        assert response.results[0].title == "inner"

    def test_keymatch_tags_outside_keymatch(self):
        """GM 之外的 GL / GD 被忽略"""
        response = parse_response(b"<GSP><GL>http://a/</GL><GD>d</GD></GSP>")

        assert response.keymatch_results == []

    def test_same_tag_means_different_things_by_context(self, onebox_xml):
        """<U> 在 OneBox 结果和自然结果中分别写入不同的对象"""
        response = _parse(onebox_xml)

        assert response.one_box_responses[1].module_results[0].url == (
            "http://telephone.corp.acme.com/cgi-bin/lookup?id=448478"
        )
        assert response.results[0].url == "http://blue.none.url/posts/comp.htm"

    def test_str_input(self):
        response = parse_response("<GSP><Q>café</Q></GSP>")

        assert response.query == "café"

    def test_file_like_input(self, simple10_xml):
        with io.BytesIO(simple10_xml) as stream:
            response = parse_response(stream)
            assert not stream.closed

        assert len(response.results) == 10

    def test_parser_is_single_use(self, simple10_xml):
        # Arrange
        parser = ResponseParser(SYSTEM_ID)
        parser.parse(simple10_xml)

        # Act & Assert
        with pytest.raises(RuntimeError):
            parser.parse(simple10_xml)

    def test_unsupported_source(self):
        with pytest.raises(TypeError):
            parse_response(12345)


class TestParsingErrors:
    """测试解析错误"""

    def test_malformed_xml(self):
        # Act & Assert
        with pytest.raises(ParsingError) as exc_info:
            _parse(b"<GSP><RES></GSP>")

        assert SYSTEM_ID in str(exc_info.value)
        assert exc_info.value.system_id == SYSTEM_ID
        assert exc_info.value.__cause__ is not None

    def test_malformed_integer(self):
        with pytest.raises(ParsingError):
            _parse(b"<GSP><RES><M>many</M></RES></GSP>")

    def test_malformed_rating(self):
        with pytest.raises(ParsingError):
            _parse(b"<GSP><RES><R><RK>high</RK></R></RES></GSP>")

    def test_malformed_search_time(self):
        with pytest.raises(ParsingError):
            _parse(b"<GSP><TM>fast</TM></GSP>")

    def test_malformed_count_attribute(self):
        with pytest.raises(ParsingError):
            _parse(b'<GSP><PARM><PMT NM="a"><PV V="x" C="lots"/></PMT></PARM></GSP>')

    def test_error_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="gsa_client.core.response_parser"):
            with pytest.raises(ParsingError):
                _parse(b"<GSP>")

        assert any("GSA[ResponseParser]" in record.getMessage() for record in caplog.records)
