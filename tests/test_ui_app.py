"""Tests for the Textual app wiring."""
import asyncio
from unittest.mock import Mock

import pytest
from textual.widgets import Button, TextArea

from conftest import FakeAnswerService
from repochat.conversation import SUBMISSION_FAILED_MESSAGE, MessageStatus
from repochat.ui import CodeChatApp
from repochat.ui.config import NOTIFY_TIMEOUT_ERROR


def _send_button(app: CodeChatApp) -> Button:
    return app.query_one("#send-btn", Button)


class TestCodeChatApp:
    """Tests for CodeChatApp driven through the Textual pilot."""

    @pytest.mark.asyncio
    async def test_send_disabled_while_answer_streams(self):
        """Test that Send stays disabled when a second question arrives mid-answer."""
        service = FakeAnswerService(fragments=["Done"])
        service.gate = asyncio.Event()
        app = CodeChatApp(service=service, project_id="demo")

        async with app.run_test() as pilot:
            app._ask("first")
            app._ask("second")
            await pilot.pause()

            assert app.session.is_busy
            assert _send_button(app).disabled
            assert [m.query for m in app.session.messages] == ["first"]

            service.gate.set()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert not app.session.is_busy
            assert not _send_button(app).disabled
            assert app.session.messages[0].answer == "Done"
            assert len(service.calls) == 1

    @pytest.mark.asyncio
    async def test_failure_notifies_and_restores_input(self):
        """Test that a failed submission shows a toast and restores the question."""
        service = FakeAnswerService(answer_error=RuntimeError("service down"))
        app = CodeChatApp(service=service, project_id="demo")

        async with app.run_test() as pilot:
            app.notify = Mock()
            app._ask("Where is login handled?")
            await app.workers.wait_for_complete()
            await pilot.pause()

            app.notify.assert_any_call(
                SUBMISSION_FAILED_MESSAGE, severity="error", timeout=NOTIFY_TIMEOUT_ERROR
            )
            assert app.query_one("#chat-input", TextArea).text == "Where is login handled?"
            assert app.session.messages[0].status is MessageStatus.FAILED
            assert not _send_button(app).disabled

    @pytest.mark.asyncio
    async def test_quit_while_streaming(self):
        """Test that exiting mid-answer shuts the worker down without errors."""
        service = FakeAnswerService()
        service.gate = asyncio.Event()
        app = CodeChatApp(service=service, project_id="demo")

        async with app.run_test() as pilot:
            app._ask("first")
            await pilot.pause()
            assert app.session.is_busy

        assert service.calls[0][0] == "first"
