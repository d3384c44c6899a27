from docassist.core.config import QA_FALLBACK_ANSWER
from docassist.models.chat import Message, ResponseBlock
from docassist.services.qa import QAResult

def build_assistant_message(result: QAResult) -> Message:
    """Wrap a QA answer in the assistant message shape the chat view renders."""
    text = result.answer if result.ok and result.answer is not None else QA_FALLBACK_ANSWER
    return Message(role="assistant", content=[ResponseBlock(type="text", content=text)])
