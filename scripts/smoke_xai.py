# scripts/smoke_xai.py
import asyncio

from dotenv import load_dotenv

load_dotenv(override=True)  # must run before Settings() reads XAI_API_KEY

from xaiclient import (  # noqa: E402
    ChatCompletionRequestBody,
    CreateResponseRequestBody,
    SystemMessage,
    UserMessage,
    XAIClientError,
    XAIDirectService,
    direct_service,
)
from xaiclient.config import Settings  # noqa: E402
from xaiclient.observability import configure_from_settings  # noqa: E402

MODEL = "grok-3-mini"


async def smoke_streaming(service: XAIDirectService):
    """Stream a chat completion and print usage from the final chunk"""
    body = ChatCompletionRequestBody(
        model=MODEL,
        messages=[SystemMessage("be terse"), UserMessage("Count to 5")],
        temperature=0.7,
    )

    print("Testing xAI streaming...")
    async with await service.streaming_chat_completion(body) as stream:
        async for chunk in stream:
            print(chunk.content, end="", flush=True)
            for choice in chunk.choices:
                if choice.finish_reason:
                    print(f"\nFinish reason: {choice.finish_reason}")
            if chunk.usage:
                print(f"Tokens: {chunk.usage}")
    print()


async def smoke_non_streaming(service: XAIDirectService):
    """One-shot chat completion"""
    body = ChatCompletionRequestBody(
        model=MODEL,
        messages=[UserMessage("What is 2+2?")],
        temperature=0,
    )

    print("Testing xAI non-streaming...")
    result = await service.chat_completion(body)
    print(f"Response: {result.choices[0].message.content}")
    print(f"Tokens: {result.usage}")
    print()


async def smoke_responses(service: XAIDirectService):
    """Responses API round trip"""
    print("Testing xAI Responses API...")
    result = await service.create_response(
        CreateResponseRequestBody(model=MODEL, input="Name one planet.", store=False)
    )
    print(f"Response: {result.output_text}")
    print()


async def smoke_error_handling():
    """Error mapping with an invalid API key"""
    print("Testing error handling (expect APIError)...")
    async with XAIDirectService("xai-invalid-key-for-testing") as service:
        try:
            await service.chat_completion(
                ChatCompletionRequestBody(model=MODEL, messages=[UserMessage("Hello")])
            )
        except XAIClientError as e:
            print(f"✅ Caught expected error: {type(e).__name__}: {e}")
    print()


async def main():
    settings = Settings()
    configure_from_settings(settings)
    async with direct_service(settings=settings) as service:
        await smoke_streaming(service)
        await smoke_non_streaming(service)
        await smoke_responses(service)
    await smoke_error_handling()


if __name__ == "__main__":
    asyncio.run(main())
