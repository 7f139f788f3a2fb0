"""系统配置模型：带类型标记的键值对。"""

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from refdata.core.enums import ConfigTypeEnum, EnabledStatusEnum
from refdata.models.base import Base, TimestampMixin, status_check


class SystemConfig(TimestampMixin, Base):
    """运行期配置项，``value`` 始终以文本存储，语义类型由 ``config_type`` 标记。"""

    __tablename__ = "sys_config"
    __table_args__ = (
        UniqueConstraint("key", name="uq_sys_config_key"),
        CheckConstraint(status_check("config_type", ConfigTypeEnum), name="config_type"),
        CheckConstraint(status_check("status", EnabledStatusEnum), name="status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(64))
    key: Mapped[str] = mapped_column(String(64), index=True)
    value: Mapped[str] = mapped_column(Text)
    config_type: Mapped[str] = mapped_column(String(16), default=ConfigTypeEnum.TEXT.value)
    is_frontend_visible: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    status: Mapped[str] = mapped_column(String(16), default=EnabledStatusEnum.ENABLED.value)
    remark: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # 每次写入递增，配置缓存据此拒绝过期的回填
    version: Mapped[int] = mapped_column(Integer, default=1, server_default="1")
