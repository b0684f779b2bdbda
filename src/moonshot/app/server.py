from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from typing import Dict, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..sim.core.config import SimulationConfig
from ..sim.core.world import SpaceSimulation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


class SimulationController:
    """Drives the simulation on a worker thread and streams snapshots from the event loop.

    The event loop never waits on a generation rollover: snapshots read the published
    population directly while the worker thread advances it.
    """

    def __init__(self, config: SimulationConfig, broadcast_interval: int = 1, max_queued_snapshots: int = 256):
        self.config = config
        self.simulation = SpaceSimulation(config)
        self.broadcast_interval = max(1, broadcast_interval)
        self.running = False
        self.frames = 0
        self.clients: Set[WebSocket] = set()
        self._client_last_sent: Dict[WebSocket, int] = {}
        # oldest unacknowledged snapshots fall off once the backlog is full
        self._snapshot_queue: deque[QueuedSnapshot] = deque(maxlen=max(1, max_queued_snapshots))
        self._last_queued_tick = -1
        self._queue_lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None

    @property
    def tick(self) -> int:
        return self.simulation.ticks

    async def start(self) -> None:
        if self._loop_task is None:
            self._loop_task = asyncio.create_task(self._loop())
        self.running = True
        self.simulation.set_paused(False)
        logger.info("Simulation started")

    async def stop(self) -> None:
        self.running = False
        self.simulation.set_paused(True)
        logger.info("Simulation stopped")

    async def _loop(self) -> None:
        interval = self.simulation.clock.frame_interval
        while True:
            await asyncio.sleep(interval)
            if not self.running:
                continue
            await asyncio.to_thread(self.simulation.frame)
            self.frames += 1
            if self.frames % self.broadcast_interval == 0:
                await self._broadcast_snapshot()

    async def acknowledge(self, tick: int) -> None:
        async with self._queue_lock:
            while self._snapshot_queue and self._snapshot_queue[0].tick <= tick:
                self._snapshot_queue.popleft()

    def _serialize_snapshot(self) -> QueuedSnapshot:
        snapshot = self.simulation.snapshot()
        payload = {
            "type": "snapshot",
            "tick": snapshot.tick,
            "payload": {
                "tick": snapshot.tick,
                "generation": snapshot.generation,
                "high_score": snapshot.high_score,
                "metrics": asdict(snapshot.metrics),
                "rockets": snapshot.rockets,
                "bodies": snapshot.bodies,
                "best": snapshot.best,
                "prev_best": snapshot.prev_best,
                "view": asdict(snapshot.view),
                "metadata": asdict(snapshot.metadata),
            },
        }
        return QueuedSnapshot(tick=snapshot.tick, payload=json.dumps(payload))

    async def _send_pending_snapshots(self, client: WebSocket) -> None:
        last_sent = self._client_last_sent.get(client, -1)
        async with self._queue_lock:
            pending = [item for item in self._snapshot_queue if item.tick > last_sent]
        for item in pending:
            await client.send_text(item.payload)
            last_sent = item.tick
        self._client_last_sent[client] = last_sent

    async def _broadcast_snapshot(self) -> None:
        if not self.clients:
            async with self._queue_lock:
                self._snapshot_queue.clear()
            return
        if self.simulation.ticks == self._last_queued_tick:
            return
        queued = self._serialize_snapshot()
        async with self._queue_lock:
            self._snapshot_queue.append(queued)
            self._last_queued_tick = queued.tick
        stale: Set[WebSocket] = set()
        for client in list(self.clients):
            try:
                await self._send_pending_snapshots(client)
            except WebSocketDisconnect:
                stale.add(client)
        for client in stale:
            self.clients.discard(client)
            self._client_last_sent.pop(client, None)


app = FastAPI(title="Moonshot Rocket Evolution")
controller = SimulationController(SimulationConfig())


@app.on_event("startup")
async def _startup() -> None:
    await controller.start()


def _view_state() -> dict:
    return asdict(controller.simulation.snapshot().view)


@app.get("/api/status")
async def status() -> JSONResponse:
    simulation = controller.simulation
    snapshot = simulation.snapshot()
    return JSONResponse(
        {
            "running": controller.running,
            "tick": snapshot.tick,
            "generation": snapshot.generation,
            "high_score": snapshot.high_score,
            "population": len(simulation.rockets),
            "metrics": asdict(snapshot.metrics),
            "view": asdict(snapshot.view),
        }
    )


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    await controller.start()
    return JSONResponse({"running": True})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    await controller.stop()
    return JSONResponse({"running": False})


@app.post("/api/control/pause")
async def toggle_pause() -> JSONResponse:
    controller.simulation.toggle_pause()
    return JSONResponse(_view_state())


@app.post("/api/control/fast-forward")
async def toggle_fast_forward() -> JSONResponse:
    controller.simulation.toggle_fast_forward()
    return JSONResponse(_view_state())


@app.post("/api/control/auto-cam")
async def toggle_auto_cam() -> JSONResponse:
    controller.simulation.toggle_auto_cam()
    return JSONResponse(_view_state())


@app.post("/api/control/render-all")
async def toggle_render_all() -> JSONResponse:
    controller.simulation.toggle_render_all_rockets()
    return JSONResponse(_view_state())


@app.post("/api/control/gravity-field")
async def toggle_gravity_field() -> JSONResponse:
    controller.simulation.toggle_gravity_field()
    return JSONResponse(_view_state())


@app.post("/api/control/grid")
async def toggle_grid() -> JSONResponse:
    controller.simulation.toggle_grid()
    return JSONResponse(_view_state())


@app.post("/api/control/next-generation")
async def next_generation() -> JSONResponse:
    controller.simulation.request_next_generation()
    return JSONResponse({"requested": True, "generation": controller.simulation.generation})


@app.post("/api/control/focus/{index}")
async def focus(index: int) -> JSONResponse:
    controller.simulation.focus(index)
    return JSONResponse(_view_state())


@app.get("/api/gravity-field")
async def gravity_field() -> JSONResponse:
    simulation = controller.simulation
    if not simulation.show_gravity_field:
        raise HTTPException(status_code=409, detail="Gravity field display is disabled")
    arrows = simulation.gravity_field.arrows()
    return JSONResponse(
        {
            "arrows": [
                [[tail.x, tail.y, vector.x, vector.y] for tail, vector in row]
                for row in arrows
            ]
        }
    )


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.clients.add(websocket)
    controller._client_last_sent[websocket] = -1
    await controller._send_pending_snapshots(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            if payload.get("type") == "ack":
                tick = payload.get("tick")
                if isinstance(tick, int):
                    await controller.acknowledge(tick)
    except WebSocketDisconnect:
        controller.clients.discard(websocket)
        controller._client_last_sent.pop(websocket, None)


__all__ = ["app", "controller"]
