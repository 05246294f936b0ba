# vidtube/__init__.py
import sys
import asyncio

# Windows: asyncpg y subprocess (ffprobe) necesitan el loop Proactor
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())
