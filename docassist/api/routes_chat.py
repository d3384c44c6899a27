from fastapi import APIRouter, Depends
from docassist.api.deps import get_qa_client
from docassist.models.chat import ChatRequest
from docassist.services.chat import build_assistant_message
from docassist.services.qa import QAClient

router = APIRouter(tags=["chat"])

@router.post("/chat")
async def chat(body: ChatRequest, qa: QAClient = Depends(get_qa_client)):
    result = await qa.ask(body.question)
    return build_assistant_message(result).model_dump(mode="json", exclude_none=True)
