# run_dev.py
"""
Servidor de desarrollo: `python run_dev.py`.

Variables: HOST, PORT, RELOAD (1/0), LOG_LEVEL y APP_MODULE
(por defecto 'vidtube.main:app'). Lee .env si existe.
"""
import os
import sys
import socket


# .env antes de importar nada de vidtube (Settings lo lee al importar)
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv(".env")

APP_MODULE = os.getenv("APP_MODULE", "vidtube.main:app")


def _lan_ip() -> str:
    """IP LAN real sin depender de hostname/DNS."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("8.8.8.8", 80))
            return s.getsockname()[0]
    except OSError:
        return "127.0.0.1"


def _reload_flag() -> bool:
    reload_env = os.getenv("RELOAD")
    if reload_env is not None:
        return reload_env.strip().lower() in ("1", "true", "yes", "on")
    # en Windows el reloader corta los streams de /media
    return not sys.platform.startswith("win")


def main():
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload_flag = _reload_flag()

    print(f"🔗 API local: http://127.0.0.1:{port}/api/v1/healthcheck")
    print(f"📱 API LAN:   http://{_lan_ip()}:{port}")
    print(f"🌀 reload={'ON' if reload_flag else 'OFF'}  app={APP_MODULE}")

    uvicorn.run(
        APP_MODULE,
        host=host,
        port=port,
        reload=reload_flag,
        reload_dirs=["vidtube"],
        reload_excludes=[".venv", ".git", "__pycache__", "media"],
        timeout_keep_alive=30,
        timeout_graceful_shutdown=15,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
