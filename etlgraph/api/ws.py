"""WebSocket endpoint: runs a graph with per-node status updates."""

import asyncio
import queue
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

from etlgraph.api.graphs import serialize_results
from etlgraph.storage.graphs import graph_from_dict
from etlgraph.values import ValueMap

router = APIRouter()


@router.websocket("/ws/run")
async def ws_run(ws: WebSocket):
    """Run a graph over WebSocket, streaming per-node status messages."""
    await ws.accept()

    try:
        payload = await ws.receive_json()
    except WebSocketDisconnect:
        return

    if not isinstance(payload, dict) or "nodes" not in payload:
        await ws.send_json({"type": "error", "error": "Invalid graph payload"})
        await ws.close()
        return

    services = ws.app.state.services
    graph = graph_from_dict(
        {"nodes": payload["nodes"], "connections": payload.get("connections", [])},
        services.nodes,
    )

    # Queue for sync callbacks -> async WebSocket sender
    msg_queue: queue.Queue[dict[str, Any]] = queue.Queue()

    def on_node_start(node_id: str) -> None:
        msg_queue.put({"type": "node_start", "node_id": node_id})

    def on_node_done(node_id: str, outputs: ValueMap) -> None:
        msg_queue.put({
            "type": "node_done",
            "node_id": node_id,
            "outputs": outputs,
            "failed": "error" in outputs,
        })

    # The graph executes synchronously, so run it in a worker thread
    run_task = asyncio.create_task(asyncio.to_thread(
        graph.execute_all,
        on_node_start=on_node_start,
        on_node_done=on_node_done,
    ))

    try:
        while not run_task.done():
            try:
                msg = await asyncio.to_thread(msg_queue.get, timeout=0.05)
                await ws.send_json(msg)
            except queue.Empty:
                continue

        while not msg_queue.empty():
            await ws.send_json(msg_queue.get_nowait())

        report = await run_task
        await ws.send_json({"type": "graph_done", **serialize_results(graph, report)})
    except WebSocketDisconnect:
        run_task.cancel()
        return
    except Exception as exc:
        run_task.cancel()
        logger.bind(source="GraphExecutor").error(f"WebSocket run failed: {exc}")
        try:
            await ws.send_json({"type": "error", "error": str(exc)})
        except Exception:
            return

    await ws.close()
