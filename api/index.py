import asyncio
from concurrent.futures import ThreadPoolExecutor

from fastapi import FastAPI

from pos_gateway.config.config import AppConfig
from pos_gateway.server.bootstrap import prepare
from pos_gateway.server.http import create_app


def _build_app(cfg: AppConfig) -> FastAPI:
	application = create_app(cfg.allowed_origins)
	# uvicorn imports this module from inside its own running loop, so the
	# pre-listen bootstrap steps get a loop of their own on a worker thread.
	with ThreadPoolExecutor(max_workers=1, thread_name_prefix="bootstrap") as pool:
		pool.submit(asyncio.run, prepare(application, cfg)).result()
	return application


# ASGI app for platforms that run their own server (e.g. `uvicorn api.index:app`).
_cfg = AppConfig()
app = _build_app(_cfg)
