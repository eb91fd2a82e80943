"""proxynode FastAPI 入口"""
import logging

from fastapi import FastAPI

from proxynode.api import nodes
from proxynode.core.config import settings
from proxynode.core.errors import install_exception_handlers
from proxynode.core.logger import setup_logging
from proxynode.db.sqlite import sqlite_db
from proxynode.services.node.bootstrap import build_node_candidate
from proxynode.services.node.registrar import node_registrar

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="proxynode - 集群节点注册与心跳",
)
install_exception_handlers(app)
app.state.self_node = None


@app.on_event("startup")
async def register_self_node() -> None:
    try:
        candidate = build_node_candidate()
        app.state.self_node = await node_registrar.register(candidate)
    except Exception as exc:
        logger.exception("节点注册失败")
        try:
            sqlite_db.create_event_log(
                source="system",
                action="app.startup.register",
                event="startup",
                status="failed",
                level="ERROR",
                message=f"节点注册失败: {exc}",
            )
        except Exception:  # noqa: BLE001
            logger.warning("启动失败事件写入失败", exc_info=True)
        raise


@app.on_event("shutdown")
async def stop_self_node() -> None:
    self_node = app.state.self_node
    if self_node is None:
        return
    await self_node.stop()
    logger.info("节点心跳已停止: %s", self_node.id)


app.include_router(nodes.router)


@app.get("/health")
async def health_check():
    self_node = app.state.self_node
    return {
        "status": "healthy" if self_node is not None and self_node.heartbeat.running else "starting",
        "node_id": self_node.id if self_node is not None else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "proxynode.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
