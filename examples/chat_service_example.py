"""Small example showing `ChatService` usage with a dummy provider.

Run directly to see output:
    python examples/chat_service_example.py
"""
import asyncio
import base64

from gpt_chat import Settings
from gpt_chat.services.chat import ChatService

# 1x1 transparent GIF
GIF = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")


class DummyProvider:
    def complete(self, cfg, request):
        kind = "image" if request.has_image else "text"
        return f"echo ({kind}, {request.model}): {request.messages[1]['content'][0]['text']}"


async def main():
    svc = ChatService(Settings(api_key="dummy"), DummyProvider())

    reply = await svc.reply("hello world")
    print("Text reply:", reply.text)

    data_url = "data:image/gif;base64," + base64.b64encode(GIF).decode()
    reply = await svc.reply(f'what is this? <img src="{data_url}"/>')
    print("Image reply:", reply.text)

    reply = await svc.reply("[img src=a.png] [img src=b.png]")
    print("Rejected:", reply.text)


if __name__ == "__main__":
    asyncio.run(main())
