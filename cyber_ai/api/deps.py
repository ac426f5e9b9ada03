from fastapi import Depends, Request

from cyber_ai.services.chat import ChatService
from cyber_ai.services.llm_service import ResponseGenerator
from cyber_ai.services.storage import Storage


# Storage and generator are built once by create_app and kept on app.state.
def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_generator(request: Request) -> ResponseGenerator:
    return request.app.state.generator


def get_chat_service(
    storage: Storage = Depends(get_storage),
    generator: ResponseGenerator = Depends(get_generator),
) -> ChatService:
    return ChatService(storage=storage, generator=generator)
