"""
Simple mock Teams incoming-webhook server.
Point a user's teamsWebhookUrl at it to see cards without a real Teams channel.
"""

from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request

app = FastAPI(title="Mock Teams Webhook")


def summarize_card(card: dict) -> list[str]:
    """Pull the title and facts out of an Adaptive Card message for printing."""
    lines = []
    for attachment in card.get("attachments", []):
        for block in attachment.get("content", {}).get("body", []):
            if block.get("type") == "TextBlock":
                lines.append(block.get("text", ""))
            elif block.get("type") == "FactSet":
                lines.extend(f"  {fact['title']} {fact['value']}" for fact in block.get("facts", []))
    return lines


@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.post("/teams/{user}")
async def receive_card(user: str, request: Request):
    """Receive a card addressed to ``user``."""
    card = await request.json()

    print(f"📨 Card for {user} at {datetime.now().isoformat()}")
    for line in summarize_card(card):
        print(line)
    print("-" * 50)

    return {"status": "success", "user": user}


if __name__ == "__main__":
    print("🚀 Starting Mock Teams Server...")
    print("📡 Listening on: http://localhost:3001")
    print("🔗 Webhook endpoint: http://localhost:3001/teams/<user>")
    print("-" * 60)

    uvicorn.run(app, host="0.0.0.0", port=3001)
