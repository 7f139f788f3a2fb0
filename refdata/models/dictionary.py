"""系统字典模型：字典类型及其下属字典项。"""

from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from refdata.core.enums import EnabledStatusEnum
from refdata.models.base import Base, TimestampMixin, status_check


class DictType(TimestampMixin, Base):
    """字典类型定义，独占其下全部字典项，删除时级联删除。"""

    __tablename__ = "sys_dict_type"
    __table_args__ = (
        UniqueConstraint("code", name="uq_sys_dict_type_code"),
        CheckConstraint(status_check("status", EnabledStatusEnum), name="status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(32))
    code: Mapped[str] = mapped_column(String(32), index=True)
    status: Mapped[str] = mapped_column(String(16), default=EnabledStatusEnum.ENABLED.value)
    remark: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    entries: Mapped[List["DictData"]] = relationship(
        back_populates="dict_type",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class DictData(TimestampMixin, Base):
    """字典项。

    ``type_code`` 是所属类型编码的冗余副本，仅由写入方根据 ``type_id``
    派生，调用方不能直接指定。
    """

    __tablename__ = "sys_dict_data"
    __table_args__ = (
        UniqueConstraint("type_id", "value", name="uq_sys_dict_data_type_value"),
        CheckConstraint(status_check("status", EnabledStatusEnum), name="status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    label: Mapped[str] = mapped_column(String(64))
    value: Mapped[str] = mapped_column(String(64))
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sys_dict_type.id", ondelete="CASCADE"), index=True
    )
    type_code: Mapped[str] = mapped_column(String(32), index=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(16), default=EnabledStatusEnum.ENABLED.value)
    remark: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    dict_type: Mapped[DictType] = relationship(back_populates="entries")
