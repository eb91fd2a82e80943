"""应用配置"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "proxynode"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 9700

    log_level: str = "INFO"
    log_file: str = "logs/app.log"
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 5

    db_path: str = "data/proxynode.db"
    event_log_retention_days: int = 30
    event_log_cleanup_interval_sec: int = 3600

    # 本节点身份与监听配置（注册时作为候选节点）
    node_id: str = ""
    node_id_file: str = "data/node_id"
    node_name: str = ""
    node_type: str = ""
    node_port: int = 443
    node_protocol: str = "https"
    node_management_domain: str = ""
    node_services: str = ""
    node_heartbeat_interval_sec: float = 1.0

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
