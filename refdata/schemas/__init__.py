"""请求与读模型。"""

from refdata.schemas.common import PageData
from refdata.schemas.dictionary import DictDataDetail, DictTypeDetail
from refdata.schemas.email_record import EmailRecordDetail
from refdata.schemas.notice import NoticeDetail
from refdata.schemas.system_config import ConfigDetail

__all__ = [
    "ConfigDetail",
    "DictDataDetail",
    "DictTypeDetail",
    "EmailRecordDetail",
    "NoticeDetail",
    "PageData",
]
