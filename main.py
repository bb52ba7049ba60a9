import argparse
import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from pos_gateway.config.config import AppConfig
from pos_gateway.config.logging_config import configure_logging
from pos_gateway.server.bootstrap import BootstrapError, bootstrap
from pos_gateway.server.http import create_app

_LOGGER = configure_logging()


def cmd_serve(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	if args.port is not None:
		cfg.port = args.port
	if args.host:
		cfg.host = args.host
	app = create_app(cfg.allowed_origins)
	try:
		asyncio.run(bootstrap(app, cfg))
	except BootstrapError as e:
		_LOGGER.error(f"Bootstrap failed: {e}", exc_info=True)
		sys.exit(1)
	except OSError as e:
		# already reported by the listen error observer
		_LOGGER.debug(f"Listen failed: {e}")
		sys.exit(1)


def build_arg_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="POS backend gateway: HTTP API + WebSocket event bridge")
	sub = parser.add_subparsers(dest="command", required=True)

	p_srv = sub.add_parser("serve", help="Run the HTTP gateway and WebSocket server")
	p_srv.add_argument("--port", type=int, help="Port to bind (overrides PORT, default 5000)")
	p_srv.add_argument("--host", help="Interface to bind (overrides HOST)")
	p_srv.set_defaults(func=cmd_serve)
	return parser


def main() -> None:
	parser = build_arg_parser()
	args = parser.parse_args()
	func = getattr(args, "func", None)
	if func is None:
		parser.print_help(sys.stderr)
		sys.exit(2)
	func(args)


if __name__ == "__main__":
	main()
