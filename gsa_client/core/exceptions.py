"""
GSA 客户端 - 自定义异常类
"""

class GSAClientError(Exception):
    """客户端库的基础异常类"""
    pass

class ClientError(GSAClientError):
    """传输层约定被破坏时的错误，例如委托对象没有返回响应体"""
    pass

class ConfigError(GSAClientError):
    """配置相关错误"""
    pass

class ParsingError(GSAClientError):
    """响应解析错误，例如 XML 格式错误或数字字段内容非法"""

    def __init__(self, message: str, system_id: str = None):
        self.system_id = system_id
        if system_id:
            message = f"{message} (systemId: {system_id})"
        super().__init__(message)
