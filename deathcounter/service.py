"""
Process wiring.

Builds the hub once and hands it to the poller and the web app, then runs
both as supervised tasks on one event loop. If either task fails the other
is cancelled and the failure is re-raised to the caller.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

import uvicorn

from .config import Config, TEXT_FILE_NAME
from .counter import DeathCounter
from .errors import WebServerError
from .monitor import SaveMonitor
from .sinks import TextFileSink
from .web.server import create_app, bind_socket, build_uvicorn_config

logger = logging.getLogger(__name__)

WEB_HOST = "0.0.0.0"


class DeathCounterService:
    """Poller + hub + sinks for one configured character slot."""

    def __init__(self, config: Config, base_dir: Union[str, Path] = "."):
        self.config = config
        self.base_dir = Path(base_dir)
        self.counter = DeathCounter()

        self.text_sink: Optional[TextFileSink] = None
        if config.enable_text_file:
            self.text_sink = TextFileSink(self.base_dir / TEXT_FILE_NAME)

        self.monitor = SaveMonitor(config, counter=self.counter, text_sink=self.text_sink)
        self.server: Optional[uvicorn.Server] = None

    @property
    def overlay_url(self) -> str:
        return f"http://localhost:{self.config.web_port}"

    def print_banner(self) -> None:
        print()
        print("=" * 50)
        print("   DEATH COUNTER")
        print("=" * 50)
        print(f"   Character slot: {self.config.character_slot}")
        if self.text_sink is not None:
            print(f"   Text file:      {self.text_sink.path}")
        if self.config.enable_web_ui:
            print(f"   Web overlay:    {self.overlay_url}")
        print("   Press Ctrl+C to stop")
        print("=" * 50)
        print()

    async def serve(self) -> None:
        """
        Run until cancelled or until a task fails.

        Raises:
            WebServerError: Port bind failed or the server died on its own
        """
        web_task: Optional[asyncio.Task] = None
        sock = None
        if self.config.enable_web_ui:
            # Bind before starting anything so a taken port is fatal right away
            sock = bind_socket(WEB_HOST, self.config.web_port)
            self.server = uvicorn.Server(build_uvicorn_config(create_app(self.counter)))

        tasks = [asyncio.create_task(self.monitor.run(), name="monitor")]
        if self.server is not None:
            web_task = asyncio.create_task(self.server.serve(sockets=[sock]), name="web")
            tasks.append(web_task)
            logger.info(f"Web overlay: {self.overlay_url}")

        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                task.result()
                if task is web_task and not self.server.should_exit:
                    raise WebServerError("web server stopped unexpectedly")
        finally:
            self.counter.close()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if sock is not None:
                sock.close()

    def run(self) -> None:
        """Blocking entry point."""
        self.print_banner()
        asyncio.run(self.serve())
