"""
End-to-end client flows against a mocked PaperChat server.
"""
import json

import httpx
import pytest

from paperchat.client.api import PaperChatAPI
from paperchat.client.flows import ChatFlow, SuggestionsFlow, UploadFlow
from paperchat.client.state import Phase
from paperchat.core.documents import STATIC_SUGGESTIONS
from paperchat.core.errors import ERROR_MESSAGES, ErrorKind
from paperchat.core.validation import PDFFile

DOC = "This research paper studies the methodology of testing."


class FakeServer:
    """Serves queued (status, body) pairs per path and records requests."""

    def __init__(self, **routes):
        self.routes = {path.replace("_", "/"): list(items) for path, items in routes.items()}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes[request.url.path.lstrip("/")]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        status, body = item
        return httpx.Response(status, json=body)

    def api(self) -> PaperChatAPI:
        return PaperChatAPI(base_url="http://paperchat.test", transport=httpx.MockTransport(self))


async def _no_sleep(seconds):
    return None


@pytest.mark.asyncio
async def test_invalid_file_is_rejected_without_network():
    server = FakeServer(upload=[(200, {})])
    flow = UploadFlow(server.api(), auto_retries=0)

    result = await flow.upload(PDFFile("notes.txt", "text/plain", b"x"))

    assert result is None
    assert server.requests == []
    assert flow.state.error.kind == ErrorKind.INVALID_FILE_TYPE
    assert flow.state.alert_message == ERROR_MESSAGES["INVALID_FILE_TYPE"]
    assert flow.state.retry_available is False
    assert flow.state.is_loading is False


@pytest.mark.asyncio
async def test_upload_success_loads_document():
    server = FakeServer(upload=[(200, {"text": DOC, "pages": 3, "filename": "paper.pdf"})])
    flow = UploadFlow(server.api(), auto_retries=0)
    content = b"%PDF-1.4 fake"

    doc = await flow.upload(PDFFile("paper.pdf", "application/pdf", content))

    assert doc is not None
    assert doc.text == DOC
    assert doc.pages == 3
    assert doc.pdf_bytes == content
    assert doc.view_mode == "pdf"
    assert doc.document_type == "research"
    assert flow.state.phase == Phase.SUCCEEDED
    assert len(server.requests) == 1
    assert b'name="file"' in server.requests[0].content


@pytest.mark.asyncio
async def test_upload_server_rejection_is_classified():
    server = FakeServer(upload=[(413, {"error": "File too large. Maximum size is 10MB. Your file is 12.0MB."})])
    flow = UploadFlow(server.api(), auto_retries=0)

    await flow.upload(PDFFile("big.pdf", "application/pdf", b"%PDF"))

    assert flow.state.error.kind == ErrorKind.FILE_TOO_LARGE
    assert flow.state.retry_available is False


@pytest.mark.asyncio
async def test_upload_empty_text_is_processing_failure_and_retry_resends():
    server = FakeServer(upload=[
        (200, {"text": "   ", "pages": 1, "filename": "scan.pdf"}),
        (200, {"text": DOC, "pages": 1, "filename": "scan.pdf"}),
    ])
    flow = UploadFlow(server.api(), auto_retries=0)

    await flow.upload(PDFFile("scan.pdf", "application/pdf", b"%PDF"))
    assert flow.state.error.kind == ErrorKind.PROCESSING_FAILED
    assert flow.state.alert_message == ERROR_MESSAGES["EMPTY_PDF"]
    assert flow.state.retry_available is True

    doc = await flow.retry()
    assert doc is not None and doc.text == DOC
    assert len(server.requests) == 2


@pytest.mark.asyncio
async def test_load_demo():
    server = FakeServer(sample=[(200, {"text": DOC, "pages": 1, "filename": "sample-document.pdf", "isDemo": True})])
    flow = UploadFlow(server.api(), auto_retries=0)

    doc = await flow.load_demo()

    assert doc.is_demo is True
    assert doc.pdf_bytes is None
    assert doc.view_mode == "text"
    assert server.requests[0].method == "GET"


@pytest.mark.asyncio
async def test_load_demo_empty_text():
    server = FakeServer(sample=[(200, {"text": "", "pages": 1, "filename": "sample-document.pdf"})])
    flow = UploadFlow(server.api(), auto_retries=0)

    assert await flow.load_demo() is None
    assert flow.state.error.kind == ErrorKind.PROCESSING_FAILED
    assert flow.state.alert_message == ERROR_MESSAGES["DEMO_EMPTY"]


@pytest.mark.asyncio
async def test_demo_server_error_then_retry():
    server = FakeServer(sample=[(503, {"error": "down"}), (200, {"text": DOC, "pages": 1})])
    flow = UploadFlow(server.api(), auto_retries=0)

    await flow.load_demo()
    assert flow.state.alert_message == ERROR_MESSAGES["DEMO_UNAVAILABLE"]

    doc = await flow.retry()
    assert doc is not None and doc.is_demo is True
    assert [r.url.path for r in server.requests] == ["/sample", "/sample"]


@pytest.mark.asyncio
async def test_chat_server_error_then_manual_retry_succeeds():
    server = FakeServer(chat=[
        (500, {"error": "Failed to get AI response. Please try again."}),
        (200, {"response": "ok", "messageId": "msg_1_abcdefghi"}),
    ])
    flow = ChatFlow(server.api(), DOC, auto_retries=0)

    assert await flow.send("  What is it?  ") is False
    state = flow.state
    assert state.error.kind == ErrorKind.SERVER_ERROR
    assert state.alert_message == ERROR_MESSAGES["AI_SERVICE_UNAVAILABLE"]
    assert state.retry_available is True
    assert [(m.sender, m.is_error) for m in state.messages] == [("user", False), ("ai", True)]

    assert await flow.retry() is True
    assert [m.content for m in state.messages] == [
        "What is it?",
        ERROR_MESSAGES["AI_SERVICE_UNAVAILABLE"],
        "ok",
    ]
    assert state.messages[-1].id == "msg_1_abcdefghi"
    assert state.error is None
    assert state.retry_count == 0

    bodies = [json.loads(r.content) for r in server.requests]
    assert bodies[0] == bodies[1] == {"message": "What is it?", "documentText": DOC}


@pytest.mark.asyncio
async def test_chat_retries_exhaust():
    server = FakeServer(chat=[(500, {"error": "boom"})])
    flow = ChatFlow(server.api(), DOC, auto_retries=0)

    await flow.send("question")
    for _ in range(3):
        await flow.retry()

    assert flow.state.phase == Phase.FAILED_TERMINAL
    assert flow.state.error.message == ERROR_MESSAGES["MAX_RETRIES_REACHED"]
    assert flow.state.retry_available is False
    assert len(server.requests) == 4

    assert await flow.retry() is False
    assert len(server.requests) == 4


@pytest.mark.asyncio
async def test_chat_validation_failure_sends_nothing():
    server = FakeServer(chat=[(200, {"response": "never"})])
    flow = ChatFlow(server.api(), DOC, auto_retries=0)

    assert await flow.send("   ") is False
    assert server.requests == []
    assert flow.state.messages == []
    assert flow.state.alert_message == "Message cannot be empty"


@pytest.mark.asyncio
async def test_chat_auth_error_not_retryable():
    server = FakeServer(chat=[(401, {"error": "Invalid OpenAI API key. Please check your configuration."})])
    flow = ChatFlow(server.api(), DOC, auto_retries=0)

    await flow.send("question")
    assert flow.state.error.kind == ErrorKind.AUTH_ERROR
    assert await flow.retry() is False
    assert len(server.requests) == 1


@pytest.mark.asyncio
async def test_chat_network_failure():
    server = FakeServer(chat=[httpx.ConnectError("refused")])
    flow = ChatFlow(server.api(), DOC, auto_retries=0)

    await flow.send("question")
    assert flow.state.error.kind == ErrorKind.NETWORK_ERROR
    assert flow.state.retry_available is True


@pytest.mark.asyncio
async def test_automatic_retries_are_invisible_on_success():
    server = FakeServer(chat=[
        (503, {"error": "busy"}),
        (429, {"error": "busy"}),
        (200, {"response": "done", "messageId": "msg_2_abcdefghi"}),
    ])
    flow = ChatFlow(server.api(), DOC, auto_retries=2, sleep=_no_sleep)

    assert await flow.send("question") is True
    assert len(server.requests) == 3
    assert [m.sender for m in flow.state.messages] == ["user", "ai"]
    assert flow.state.retry_count == 0


@pytest.mark.asyncio
async def test_feedback_success_patches_message():
    server = FakeServer(
        chat=[(200, {"response": "answer", "messageId": "msg_3_abcdefghi"})],
        feedback=[(200, {"success": True, "message": "Feedback recorded successfully"})],
    )
    flow = ChatFlow(server.api(), DOC, auto_retries=0)
    await flow.send("question")

    await flow.submit_feedback("msg_3_abcdefghi", "helpful")

    assert flow.state.messages[-1].feedback == "helpful"
    assert json.loads(server.requests[-1].content) == {"messageId": "msg_3_abcdefghi", "feedback": "helpful"}


@pytest.mark.asyncio
async def test_feedback_failure_is_silent():
    server = FakeServer(
        chat=[(200, {"response": "answer", "messageId": "msg_4_abcdefghi"})],
        feedback=[(500, {"error": "Failed to record feedback"})],
    )
    flow = ChatFlow(server.api(), DOC, auto_retries=0)
    await flow.send("question")

    await flow.submit_feedback("msg_4_abcdefghi", "unhelpful")

    assert flow.state.messages[-1].feedback is None
    assert flow.state.error is None
    assert len(server.requests) == 2


@pytest.mark.asyncio
async def test_suggestions_from_server():
    server = FakeServer(suggestions=[(200, {"suggestions": ["A?", "B?"], "documentType": "research"})])
    flow = SuggestionsFlow(server.api(), auto_retries=0)

    assert await flow.fetch(DOC) == ["A?", "B?"]
    assert json.loads(server.requests[0].content)["documentType"] == "research"


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [(500, {"error": "Failed to generate suggestions"}), (200, {"suggestions": []})])
async def test_suggestions_fall_back_to_static(reply):
    server = FakeServer(suggestions=[reply])
    flow = SuggestionsFlow(server.api(), auto_retries=0)

    assert await flow.fetch(DOC) == STATIC_SUGGESTIONS["research"]
