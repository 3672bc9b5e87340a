"""
==============================================================================
Product Feed WebSocket Module
==============================================================================

Live product collection for catalog and admin screens.

Flow:
-----
1. Client connects to /ws/products
2. Server sends the current collection immediately
3. Every store write pushes a fresh complete collection
4. Client sends {"type": "stop"} or disconnects to end the feed

Messages (Server → Client):
---------------------------
- {"type": "snapshot", "version": N, "total": N, "products": [...]}

Messages (Client → Server):
---------------------------
- {"type": "stop"}                           → Close the feed

==============================================================================
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Mapping

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from app.catalog.models import Product, ProductResponse
from app.store import get_document_store
from app.store.document_store import DocumentStore


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()


def render_snapshot(documents: Mapping[str, Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Render a store snapshot as product payloads, skipping malformed ones."""
    rendered = []
    for product_id, document in documents.items():
        try:
            product = Product.from_document(product_id, document)
        except ValueError as e:
            logger.warning(f"Skipping malformed product {product_id}: {e}")
            continue
        rendered.append(
            ProductResponse.from_product(product).model_dump(by_alias=True, exclude={"is_favorite"})
        )
    return rendered


class ProductFeedHandler:
    """
    Pushes complete product snapshots to one WebSocket client.

    Store callbacks may fire on any thread; they are handed to the event
    loop through a queue.
    """

    def __init__(self, websocket: WebSocket, store: DocumentStore):
        self._websocket = websocket
        self._store = store
        self._queue: "asyncio.Queue[Dict[str, Dict[str, Any]]]" = asyncio.Queue()
        self._version = 0

    async def _pump(self) -> None:
        while True:
            documents = await self._queue.get()
            self._version += 1
            products = render_snapshot(documents)
            await self._websocket.send_json({
                "type": "snapshot",
                "version": self._version,
                "total": len(products),
                "products": products
            })

    async def _listen(self) -> None:
        while True:
            message = await self._websocket.receive_text()
            try:
                data = json.loads(message)
            except json.JSONDecodeError:
                continue

            if isinstance(data, dict) and data.get("type") == "stop":
                logger.info("🛑 Client requested stop")
                return

    async def run(self) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        logger.info("📱 Product feed connected")

        loop = asyncio.get_running_loop()
        unsubscribe = self._store.subscribe(
            lambda documents: loop.call_soon_threadsafe(self._queue.put_nowait, documents)
        )

        tasks = [asyncio.create_task(self._pump()), asyncio.create_task(self._listen())]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                task.result()
            await self._websocket.close()
        except WebSocketDisconnect:
            logger.info("📱 Client disconnected")
        finally:
            for task in tasks:
                task.cancel()
            unsubscribe()
            logger.info("✅ Product feed closed")


@router.websocket("/ws/products")
async def websocket_products(
    websocket: WebSocket,
    store: DocumentStore = Depends(get_document_store)
):
    """Live product collection via WebSocket."""
    handler = ProductFeedHandler(websocket, store)
    await handler.run()
