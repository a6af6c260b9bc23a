"""
SSE (Server-Sent Events) Connection Manager for user-facing alerts.

Fire-and-forget: publishing to a user with no open stream is a no-op.
"""
import asyncio
from typing import Dict, List


class NotificationManager:
    """Manages SSE connections, one channel per user id."""
    
    def __init__(self):
        # Map user_id -> list of queues
        self.active_connections: Dict[str, List[asyncio.Queue]] = {}

    async def connect(self, user_id: str) -> asyncio.Queue:
        """Create a new connection for a user."""
        if user_id not in self.active_connections:
            self.active_connections[user_id] = []
        queue: asyncio.Queue = asyncio.Queue()
        self.active_connections[user_id].append(queue)
        return queue

    def disconnect(self, user_id: str, queue: asyncio.Queue) -> None:
        """Remove a connection from a user."""
        if user_id in self.active_connections:
            if queue in self.active_connections[user_id]:
                self.active_connections[user_id].remove(queue)
            if not self.active_connections[user_id]:
                del self.active_connections[user_id]

    def publish(self, user_id: str, message: dict) -> None:
        """Queue a message for every open stream of a user without awaiting."""
        for queue in self.active_connections.get(user_id, []):
            queue.put_nowait(message)

    async def broadcast(self, user_id: str, message: dict) -> None:
        """Broadcast a message to all connections for a user."""
        if user_id in self.active_connections:
            for queue in self.active_connections[user_id]:
                await queue.put(message)

    def alert(self, user_id: str, title: str, body: str) -> None:
        """Show a user-facing alert."""
        print(f"🔔 [{user_id}] {title}: {body}")
        self.publish(user_id, {"type": "alert", "title": title, "body": body})


# Global manager instance
notification_manager = NotificationManager()
