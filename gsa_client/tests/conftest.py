"""
GSA 客户端 - Pytest 配置和共享 Fixtures
"""
from pathlib import Path

import pytest

from ..core import cache_manager

DATA_DIR = Path(__file__).parent / "data"


def load_fixture(name: str) -> bytes:
    """读取 tests/data 下的 XML 样本"""
    return (DATA_DIR / name).read_bytes()


def build_results_xml(count: int) -> bytes:
    """生成包含 count 条结果的最小响应文档"""
    results = "".join(
        f'<R N="{i}" MIME="text/html">'
        f"<U>http://blue.none.url/doc{i}.htm</U>"
        f"<T>Doc {i}</T><RK>{i % 10}</RK><S>snippet {i}</S>"
        f"</R>"
        for i in range(1, count + 1)
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f"<GSP><TM>0.1</TM><Q>doc</Q>"
        f'<RES SN="1" EN="{count}"><M>{count}</M>{results}</RES></GSP>'
    ).encode("utf-8")


@pytest.fixture
def simple10_xml():
    return load_fixture("Simple10.xml")


@pytest.fixture
def meta_xml():
    return load_fixture("Meta.xml")


@pytest.fixture
def suggestions_xml():
    return load_fixture("SuggestionsAndSynonyms.xml")


@pytest.fixture
def navigation_xml():
    return load_fixture("DynamicNavigation.xml")


@pytest.fixture
def onebox_xml():
    return load_fixture("OneBox.xml")


@pytest.fixture
def clean_cache():
    """测试结束后关闭全局缓存并清空统计，避免影响其他测试"""
    yield
    cache_manager.close_cache()
    cache_manager._cache_stats.clear()
