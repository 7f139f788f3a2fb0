"""业务服务层：各模块提供一个服务单例，方法均接收显式的数据库会话。

请从具体模块导入，例如 ``from refdata.services.notice_service import notice_service``。
"""
