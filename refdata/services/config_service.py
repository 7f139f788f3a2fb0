"""系统配置服务：键值配置的写入、类型化读取与缓存维护。"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.orm import Session

from refdata.core.cache import get_config_cache
from refdata.core.enums import ConfigTypeEnum, EnabledStatusEnum
from refdata.core.exceptions import ConflictError, DisabledError, NotFoundError
from refdata.crud.system_config import system_config_crud
from refdata.db.session import atomic
from refdata.models.system_config import SystemConfig
from refdata.schemas.common import PageData, enum_value, normalize_page, validate_payload
from refdata.schemas.system_config import ConfigDetail, ConfigUpsert
from refdata.services.config_codec import decode_config_value

logger = logging.getLogger(__name__)


def _cache_payload(config: SystemConfig) -> str:
    return json.dumps(
        {
            "key": config.key,
            "value": config.value,
            "config_type": config.config_type,
            "status": config.status,
        },
        ensure_ascii=False,
    )


class ConfigService:
    """封装系统配置相关的业务逻辑。"""

    def upsert_config(
        self,
        db: Session,
        *,
        key: str,
        value: str,
        config_type: ConfigTypeEnum | str = ConfigTypeEnum.TEXT,
        is_frontend_visible: bool = False,
        remark: Optional[str] = None,
        name: Optional[str] = None,
    ) -> ConfigDetail:
        """写入配置：键已存在则原地更新，否则新建。

        写入前按 ``config_type`` 校验取值；并发插入同一键时，落败方按更新重试一次。
        """
        payload = validate_payload(
            ConfigUpsert,
            key=key,
            value=value,
            config_type=config_type,
            is_frontend_visible=is_frontend_visible,
            remark=remark,
            name=name,
        )
        decode_config_value(payload.value, payload.config_type)

        try:
            config = self._write(db, payload)
        except ConflictError:
            logger.info("Concurrent insert detected for config %s, retrying as update", payload.key)
            config = self._write(db, payload)
        get_config_cache().store(config.key, _cache_payload(config), config.version)
        return ConfigDetail.model_validate(config)

    def _write(self, db: Session, payload: ConfigUpsert) -> SystemConfig:
        with atomic(db):
            config = system_config_crud.get_by_key(db, payload.key, for_update=True)
            if config is None:
                # 新建的版本需高于缓存中可能残留的删除标记
                config = system_config_crud.create(
                    db,
                    {
                        "name": (payload.name or payload.key).strip(),
                        "key": payload.key,
                        "value": payload.value,
                        "config_type": payload.config_type.value,
                        "is_frontend_visible": payload.is_frontend_visible,
                        "status": EnabledStatusEnum.ENABLED.value,
                        "remark": payload.remark,
                        "version": get_config_cache().current_version(payload.key) + 1,
                    },
                    auto_commit=False,
                )
                action = "Created"
            else:
                config.value = payload.value
                config.config_type = payload.config_type.value
                config.is_frontend_visible = payload.is_frontend_visible
                if payload.name:
                    config.name = payload.name.strip()
                if payload.remark is not None:
                    config.remark = payload.remark
                config.version += 1
                system_config_crud.save(db, config, auto_commit=False)
                action = "Updated"
        db.refresh(config)
        logger.info("%s config %s (type=%s, version=%s)", action, config.key, config.config_type, config.version)
        return config

    def get_config_value(self, db: Session, *, key: str, include_disabled: bool = False) -> Any:
        """按类型解析后返回配置值；禁用的配置默认视为不可读。

        缓存未命中时读库并按行版本回填；若期间已有写入方写入更新的版本，回填被拒绝，
        下一次读取即命中新值。
        """
        cache = get_config_cache()
        cached = cache.get(key)
        if cached is None:
            config = self._require_config(db, key)
            cached = _cache_payload(config)
            cache.store(key, cached, config.version)
        record = json.loads(cached)

        if record["status"] != EnabledStatusEnum.ENABLED.value and not include_disabled:
            raise DisabledError(f"配置 {key} 已禁用")
        return decode_config_value(record["value"], record["config_type"])

    def get_config(self, db: Session, *, key: str) -> ConfigDetail:
        return ConfigDetail.model_validate(self._require_config(db, key))

    def list_configs(
        self,
        db: Session,
        *,
        keyword: Optional[str] = None,
        config_type: Optional[ConfigTypeEnum | str] = None,
        is_frontend_visible: Optional[bool] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[ConfigDetail]:
        page, size, skip = normalize_page(page, size)
        items, total = system_config_crud.list_with_filters(
            db,
            keyword=keyword,
            config_type=enum_value(ConfigTypeEnum, config_type),
            is_frontend_visible=is_frontend_visible,
            status=enum_value(EnabledStatusEnum, status),
            skip=skip,
            limit=size,
        )
        return PageData[ConfigDetail](
            total=total,
            page=page,
            size=size,
            list=[ConfigDetail.model_validate(item) for item in items],
        )

    def get_frontend_configs(self, db: Session) -> Dict[str, Any]:
        """返回所有启用且前端可见的配置 ``{key: 解析后的值}``。"""
        configs = system_config_crud.list_frontend_visible(db, status=EnabledStatusEnum.ENABLED.value)
        return {config.key: decode_config_value(config.value, config.config_type) for config in configs}

    def set_config_status(self, db: Session, *, key: str, status: EnabledStatusEnum | str) -> ConfigDetail:
        normalized = enum_value(EnabledStatusEnum, status)
        with atomic(db):
            config = self._require_config(db, key, for_update=True)
            config.status = normalized
            config.version += 1
            system_config_crud.save(db, config, auto_commit=False)
        db.refresh(config)
        get_config_cache().store(key, _cache_payload(config), config.version)
        logger.info("Set config %s status to %s", key, normalized)
        return ConfigDetail.model_validate(config)

    def delete_configs(self, db: Session, *, ids: Sequence[int]) -> int:
        """批量删除配置并在缓存中写入删除标记，返回删除数量。"""
        id_list = list(ids)
        with atomic(db):
            versions = system_config_crud.list_versions_by_ids(db, id_list)
            deleted = system_config_crud.delete_by_ids(db, id_list)
        cache = get_config_cache()
        for key, version in versions:
            cache.mark_deleted(key, version + 1)
        logger.info("Deleted %s configs", deleted)
        return deleted

    def refresh_config_cache(self, db: Session) -> int:
        """用数据库中的全部配置重建缓存，返回读取的条目数；缓存中更新的版本保持不变。"""
        cache = get_config_cache()
        configs = system_config_crud.list_all(db)
        for config in configs:
            cache.store(config.key, _cache_payload(config), config.version)
        logger.info("Refreshed config cache with %s entries", len(configs))
        return len(configs)

    def _require_config(self, db: Session, key: str, *, for_update: bool = False) -> SystemConfig:
        config = system_config_crud.get_by_key(db, key, for_update=for_update)
        if config is None:
            raise NotFoundError(f"配置 {key} 不存在")
        return config


config_service = ConfigService()
