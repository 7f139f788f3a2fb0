"""数据访问层：每个实体一个 CRUD 单例。"""

from refdata.crud.dictionary import dict_data_crud
from refdata.crud.dictionary_type import dict_type_crud
from refdata.crud.email_record import email_record_crud
from refdata.crud.notice import notice_crud
from refdata.crud.system_config import system_config_crud

__all__ = [
    "dict_data_crud",
    "dict_type_crud",
    "email_record_crud",
    "notice_crud",
    "system_config_crud",
]
