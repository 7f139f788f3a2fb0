"""核心基础设施：配置、日志、异常、缓存与时区工具。"""
