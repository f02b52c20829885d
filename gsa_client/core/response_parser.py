"""
GSA 客户端 - 响应解析器
以流式、单遍的方式把设备返回的 XML 绑定为 Response 对象，不构建完整的文档树。

解析器作为 lxml 的 parser target 接收 start / data / end 事件:
- 每个元素在打开时压入一个帧 (frame)，关闭时弹出；
- 部分元素会开启一个命名上下文 (结果、OneBox、拼写建议等)，关闭标签按最内层上下文分派，
  因此同名标签 (例如 <U>) 在不同上下文中含义不同；
- 每条记录在打开时创建构建器，在关闭时生成不可变模型并追加到父级列表。
"""
from enum import Enum
from itertools import chain
from typing import Any, Dict, Iterator, List, Optional, Union

from lxml import etree

from .exceptions import ParsingError
from .log import get_logger
from .tags import Tag, classify
from ..models.navigation import (
    DynamicNavigationAttribute, DynamicNavigationAttributeResult, NavigationResponse
)
from ..models.onebox import FieldEntry, OneBoxResponse, OneBoxResult
from ..models.response import Response
from ..models.results import Keymatch, Result, Spelling, Suggestion

logger = get_logger(__name__)

# 从文件类对象中每次读取的字节数
READ_CHUNK_SIZE = 64 * 1024

DEFAULT_CACHE_ENCODING = "UTF-8"


class Context(Enum):
    RESPONSE = "response"
    RESULT = "result"
    NAVIGATION_RESPONSE = "navigation_response"
    NAVIGATION_RESULT = "navigation_result"
    ONEBOX_RESPONSE = "onebox_response"
    ONEBOX_RESULT = "onebox_result"
    SPELLING = "spelling"
    SYNONYMS = "synonyms"
    KEYMATCH = "keymatch"


# 开启上下文的标签 -> (上下文, 允许的直接外层上下文；None 表示任意位置)
_CONTEXT_OPENERS = {
    Tag.RES: (Context.RESPONSE, None),
    Tag.R: (Context.RESULT, {Context.RESPONSE}),
    Tag.PARM: (Context.NAVIGATION_RESPONSE, None),
    Tag.PMT: (Context.NAVIGATION_RESULT, {Context.NAVIGATION_RESPONSE}),
    Tag.OBRES: (Context.ONEBOX_RESPONSE, None),
    Tag.MODULE_RESULT: (Context.ONEBOX_RESULT, {Context.ONEBOX_RESPONSE}),
    Tag.SPELLING: (Context.SPELLING, None),
    Tag.SYNONYMS: (Context.SYNONYMS, None),
    Tag.GM: (Context.KEYMATCH, None),
}


class _Frame:
    """一个已打开、尚未关闭的元素"""
    __slots__ = ("tag", "attrs", "context", "builder")

    def __init__(self, tag: Tag, attrs: Dict[str, str], context: Optional[Context] = None,
                 builder: Optional[Dict[str, Any]] = None):
        self.tag = tag
        self.attrs = attrs
        self.context = context
        self.builder = builder


class ResponseParser:
    """
    单次使用的响应解析器。

    一个实例只处理一份输入，不能在多次解析或多个线程之间共享；
    需要并发解析时，每次请求各自创建实例即可。

    :param system_id: 诊断用的标识 (通常为设备的基础 URL)，只出现在日志和错误信息中
    """

    def __init__(self, system_id: Optional[str] = None):
        self.system_id = system_id
        self._used = False
        self._frames: List[_Frame] = []
        self._contexts: List[_Frame] = []
        self._text: List[str] = []
        self._unknown_seen = set()
        self._navigation = NavigationResponse()
        self._response: Dict[str, Any] = {
            "params": {},
            "one_box_responses": [],
            "keymatch_results": [],
            "synonyms_with_markup": [],
        }
        self._scope_handlers = {
            Context.ONEBOX_RESULT: self._end_in_onebox_result,
            Context.ONEBOX_RESPONSE: self._end_in_onebox_response,
            Context.RESULT: self._end_in_result,
            Context.NAVIGATION_RESULT: self._end_ignored,
            Context.NAVIGATION_RESPONSE: self._end_ignored,
            Context.RESPONSE: self._end_in_response,
            Context.SPELLING: self._end_in_spelling,
            Context.SYNONYMS: self._end_ignored,
            Context.KEYMATCH: self._end_in_keymatch,
        }

    # ------------------------------------------------------------------
    # 入口
    # ------------------------------------------------------------------

    def parse(self, source: Union[bytes, str, Any]) -> Response:
        """
        解析一份完整的响应。

        :param source: bytes、str，或带 read() 方法的文件类对象；
                       流的关闭由调用方负责
        :return: 解析得到的 Response
        :raises ParsingError: XML 格式错误或数字字段内容非法
        """
        if self._used:
            raise RuntimeError("ResponseParser instances are single-use; create a new one per parse")
        self._used = True

        chunks = _iter_chunks(source)
        first = next(chunks, b"")
        text_mode = isinstance(first, str)
        # 文本输入统一以 UTF-8 送入，忽略文档声明中的编码
        parser = etree.XMLParser(
            target=self,
            resolve_entities=False,
            no_network=True,
            encoding="utf-8" if text_mode else None,
        )

        try:
            for chunk in chain([first], chunks):
                parser.feed(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
            response = parser.close()
        except ParsingError as e:
            logger.error(f"GSA[ResponseParser]: 响应内容非法: {e}")
            raise
        except etree.XMLSyntaxError as e:
            logger.error(f"GSA[ResponseParser]: XML 格式错误: {e}")
            raise ParsingError(f"Response is not well-formed XML: {e}", self.system_id) from e

        logger.debug(
            f"GSA[ResponseParser]: 解析完成，共 {len(response.results)} 条结果，"
            f"{len(response.one_box_responses)} 个 OneBox 模块"
        )
        return response

    # ------------------------------------------------------------------
    # parser target 事件
    # ------------------------------------------------------------------

    def start(self, name: str, attrib) -> None:
        tag = classify(name)
        attrs = dict(attrib)
        frame = _Frame(tag, attrs)

        if tag is Tag.UNKNOWN:
            if name not in self._unknown_seen:
                self._unknown_seen.add(name)
                logger.debug(f"GSA[ResponseParser]: 忽略未知元素 <{name}>")
        elif tag in _CONTEXT_OPENERS:
            self._open_context(frame)
        else:
            self._start_leaf(frame)

        self._frames.append(frame)
        self._text.clear()

    def data(self, text: str) -> None:
        self._text.append(text)

    def end(self, name: str) -> None:
        frame = self._frames.pop()
        text = "".join(self._text)

        if frame.context is not None:
            self._close_context(frame, text)
            return

        if frame.tag is Tag.UNKNOWN:
            return

        current = self._current_context()
        if current is None:
            self._end_top_level(frame, text)
        else:
            self._scope_handlers[current](frame, text)

    def close(self) -> Response:
        if self._frames:
            logger.warning(f"GSA[ResponseParser]: 文档结束时仍有 {len(self._frames)} 个未关闭的元素")
        return Response(**self._response)

    # ------------------------------------------------------------------
    # 上下文管理
    # ------------------------------------------------------------------

    def _current_context(self) -> Optional[Context]:
        return self._contexts[-1].context if self._contexts else None

    def _current_builder(self) -> Dict[str, Any]:
        return self._contexts[-1].builder

    def _open_context(self, frame: _Frame) -> None:
        context, allowed_parents = _CONTEXT_OPENERS[frame.tag]

        if any(open_frame.context is context for open_frame in self._contexts):
            logger.warning(f"GSA[ResponseParser]: <{frame.tag.value}> 出现在同类上下文内部，已忽略")
            return
        if allowed_parents is not None and self._current_context() not in allowed_parents:
            logger.warning(
                f"GSA[ResponseParser]: <{frame.tag.value}> 出现在非法位置 "
                f"(当前上下文: {self._current_context()})，已忽略"
            )
            return

        frame.context = context
        frame.builder = self._new_builder(frame)
        self._contexts.append(frame)

    def _new_builder(self, frame: _Frame) -> Dict[str, Any]:
        attrs = frame.attrs
        if frame.context is Context.RESPONSE:
            return {
                "start_index": self._int_attr(attrs, "SN", absent=1, empty=1),
                "end_index": self._int_attr(attrs, "EN", absent=1, empty=1),
                "results": [],
            }
        if frame.context is Context.RESULT:
            return {
                "mime_type": attrs.get("MIME"),
                "indentation": self._int_attr(attrs, "L", absent=1, empty=1),
                "metas": {},
                "fields": {},
            }
        if frame.context is Context.NAVIGATION_RESPONSE:
            return {"results": []}
        if frame.context is Context.NAVIGATION_RESULT:
            return {
                "name": attrs.get("NM"),
                "label": attrs.get("DN"),
                "type": self._int_attr(attrs, "T", absent=0, empty=0),
                "is_range": attrs.get("IR") == "1",
                "results": [],
            }
        if frame.context is Context.ONEBOX_RESPONSE:
            return {"module_results": []}
        if frame.context is Context.ONEBOX_RESULT:
            return {"field_entries": []}
        if frame.context is Context.SPELLING:
            return {"suggestions": []}
        return {}

    def _close_context(self, frame: _Frame, text: str) -> None:
        self._contexts.pop()
        builder = frame.builder

        if frame.context is Context.RESPONSE:
            self._response["start_index"] = builder["start_index"]
            self._response["end_index"] = builder["end_index"]
            self._response["results"] = builder["results"]
            self._response["navigation_response"] = self._navigation
        elif frame.context is Context.RESULT:
            self._parent_builder(Context.RESPONSE)["results"].append(Result(**builder))
        elif frame.context is Context.NAVIGATION_RESPONSE:
            self._navigation = NavigationResponse(results=builder["results"])
        elif frame.context is Context.NAVIGATION_RESULT:
            self._parent_builder(Context.NAVIGATION_RESPONSE)["results"].append(
                DynamicNavigationAttribute(**builder)
            )
        elif frame.context is Context.ONEBOX_RESPONSE:
            self._response["one_box_responses"].append(OneBoxResponse(**builder))
        elif frame.context is Context.ONEBOX_RESULT:
            self._parent_builder(Context.ONEBOX_RESPONSE)["module_results"].append(
                OneBoxResult(**builder)
            )
        elif frame.context is Context.SPELLING:
            self._response["spelling"] = Spelling(**builder)
        elif frame.context is Context.KEYMATCH:
            self._response["keymatch_results"].append(Keymatch(**builder))
        # SYNONYMS 关闭时只需退出上下文

    def _parent_builder(self, context: Context) -> Dict[str, Any]:
        # 打开子上下文时已校验过直接外层，这里总能找到
        for open_frame in reversed(self._contexts):
            if open_frame.context is context:
                return open_frame.builder
        raise RuntimeError(f"No open {context} context")

    # ------------------------------------------------------------------
    # 打开标签: 读取属性
    # ------------------------------------------------------------------

    def _start_leaf(self, frame: _Frame) -> None:
        tag = frame.tag
        attrs = frame.attrs
        current = self._current_context()

        if tag is Tag.PARAM:
            name = attrs.get("name")
            if name is None:
                logger.warning("GSA[ResponseParser]: <PARAM> 缺少 name 属性，已忽略")
                return
            self._response["params"][name] = attrs.get("value")

        elif tag is Tag.C:
            if current is Context.RESULT:
                encoding = attrs.get("ENC")
                if encoding is None or not encoding.strip():
                    encoding = DEFAULT_CACHE_ENCODING
                builder = self._current_builder()
                builder["cache_doc_id"] = attrs.get("CID")
                builder["cache_doc_size"] = attrs.get("SZ")
                builder["cache_doc_encoding"] = encoding

        elif tag is Tag.FS:
            if current is Context.RESULT:
                self._put_pair(self._current_builder()["fields"], attrs, "NAME", "VALUE", tag)

        elif tag is Tag.MT:
            if current is Context.RESULT:
                self._put_pair(self._current_builder()["metas"], attrs, "N", "V", tag)

        elif tag is Tag.SUGGESTION:
            if current is Context.SPELLING:
                frame.builder = {"text": attrs.get("q")}

        elif tag is Tag.ONE_SYNONYM:
            if current is Context.SYNONYMS:
                self._response["synonyms_with_markup"].append(attrs.get("q"))

        elif tag is Tag.PV:
            if current is Context.NAVIGATION_RESULT:
                self._current_builder()["results"].append(DynamicNavigationAttributeResult(
                    value=attrs.get("V"),
                    count=self._int_attr(attrs, "C", absent=0, empty=0),
                    low_range=attrs.get("L"),
                    high_range=attrs.get("H"),
                ))

    @staticmethod
    def _put_pair(target: Dict[str, Optional[str]], attrs: Dict[str, str],
                  key_attr: str, value_attr: str, tag: Tag) -> None:
        key = attrs.get(key_attr)
        if key is None:
            logger.warning(f"GSA[ResponseParser]: <{tag.value}> 缺少 {key_attr} 属性，已忽略")
            return
        target[key] = attrs.get(value_attr)

    # ------------------------------------------------------------------
    # 关闭标签: 按最内层上下文分派
    # ------------------------------------------------------------------

    def _end_in_onebox_result(self, frame: _Frame, text: str) -> None:
        builder = self._current_builder()
        if frame.tag is Tag.U:
            builder["url"] = text.strip()
        elif frame.tag is Tag.FIELD:
            builder["field_entries"].append(
                FieldEntry(key=frame.attrs.get("name"), value=text.strip())
            )

    def _end_in_onebox_response(self, frame: _Frame, text: str) -> None:
        builder = self._current_builder()
        if frame.tag is Tag.PROVIDER:
            builder["provider_name"] = text.strip()
        elif frame.tag is Tag.URL_TEXT:
            builder["title_text"] = text.strip()
        elif frame.tag is Tag.URL_LINK:
            builder["title_link"] = text.strip()
        elif frame.tag is Tag.IMAGE_SOURCE:
            builder["image_source"] = text.strip()

    def _end_in_result(self, frame: _Frame, text: str) -> None:
        builder = self._current_builder()
        if frame.tag is Tag.U:
            builder["url"] = text
        elif frame.tag is Tag.UE:
            builder["escaped_url"] = text
        elif frame.tag is Tag.T:
            builder["title"] = text
        elif frame.tag is Tag.RK:
            builder["rating"] = self._parse_int(text, "RK")
        elif frame.tag is Tag.S:
            builder["summary"] = text
        elif frame.tag is Tag.LANG:
            builder["language"] = text

    def _end_in_response(self, frame: _Frame, text: str) -> None:
        if frame.tag is Tag.M:
            self._response["num_results"] = self._parse_int(text, "M")
        elif frame.tag is Tag.FI:
            self._response["is_filtered"] = True
        elif frame.tag is Tag.PU:
            self._response["previous_response_url"] = text
        elif frame.tag is Tag.NU:
            self._response["next_response_url"] = text

    def _end_in_spelling(self, frame: _Frame, text: str) -> None:
        if frame.tag is Tag.SUGGESTION and frame.builder is not None:
            frame.builder["text_with_markup"] = text
            self._current_builder()["suggestions"].append(Suggestion(**frame.builder))

    def _end_in_keymatch(self, frame: _Frame, text: str) -> None:
        if frame.tag is Tag.GL:
            self._current_builder()["url"] = text
        elif frame.tag is Tag.GD:
            self._current_builder()["description"] = text

    def _end_ignored(self, frame: _Frame, text: str) -> None:
        pass

    def _end_top_level(self, frame: _Frame, text: str) -> None:
        if frame.tag is Tag.TM:
            self._response["search_time"] = self._parse_float(text, "TM")
        elif frame.tag is Tag.Q:
            self._response["query"] = text

    # ------------------------------------------------------------------
    # 数字转换
    # ------------------------------------------------------------------

    def _parse_int(self, raw: str, what: str) -> int:
        try:
            return int(raw)
        except ValueError:
            raise ParsingError(f"Malformed integer in {what}: {raw!r}", self.system_id) from None

    def _parse_float(self, raw: str, what: str) -> float:
        try:
            return float(raw)
        except ValueError:
            raise ParsingError(f"Malformed number in {what}: {raw!r}", self.system_id) from None

    def _int_attr(self, attrs: Dict[str, str], name: str, absent: int, empty: int) -> int:
        """读取整数属性；属性缺失与属性为空字符串是两种情况，各有默认值"""
        raw = attrs.get(name)
        if raw is None:
            return absent
        if raw == "":
            return empty
        return self._parse_int(raw, f"attribute {name}")


def _iter_chunks(source) -> Iterator[Union[bytes, str]]:
    if isinstance(source, (bytes, str)):
        yield source
        return
    if isinstance(source, bytearray):
        yield bytes(source)
        return
    read = getattr(source, "read", None)
    if read is None:
        raise TypeError(f"Unsupported response source: {type(source).__name__}")
    while True:
        chunk = read(READ_CHUNK_SIZE)
        if not chunk:
            return
        yield chunk


def parse_response(source, system_id: Optional[str] = None) -> Response:
    """用一个新的 ResponseParser 解析 source，便于一次性调用"""
    return ResponseParser(system_id).parse(source)
