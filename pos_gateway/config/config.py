import os


DEFAULT_PORT = 5000

DEFAULT_ALLOWED_ORIGINS = [
	"https://demo-edpos.vercel.app",
	"http://localhost:5000",
	"http://localhost:3000",
	"http://localhost:5001",
	"http://127.0.0.1:5000",
	"http://127.0.0.1:5001",
]


def read_env(name: str, default: str | None = None, required: bool = False) -> str | None:
	value = os.environ.get(name, default)
	if required and (value is None or value == ""):
		raise RuntimeError(f"Missing required environment variable: {name}")
	return value


class AppConfig:
	def __init__(self) -> None:
		self.host = read_env("HOST", "0.0.0.0")
		self.port: int = self._read_port()
		self.allowed_origins: list[str] = self._read_allowed_origins()
		self.websocket_path = read_env("WEBSOCKET_PATH", "/ws") or "/ws"
		self.log_level = (read_env("LOG_LEVEL", "INFO") or "INFO").upper()

	def _read_port(self) -> int:
		raw = read_env("PORT", str(DEFAULT_PORT))
		try:
			return int(raw or DEFAULT_PORT)
		except Exception:
			return DEFAULT_PORT

	def _read_allowed_origins(self) -> list[str]:
		origins = list(DEFAULT_ALLOWED_ORIGINS)
		raw = read_env("CORS_ALLOWED_ORIGINS", "")
		if not raw:
			return origins
		for item in raw.split(","):
			item = item.strip()
			if item and item not in origins:
				origins.append(item)
		return origins
