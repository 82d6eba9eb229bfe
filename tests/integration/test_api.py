"""
End-to-end tests of the HTTP API with the translation service stubbed.

Translation jobs run synchronously inside the request so each test can
inspect the final session state right after the translate call.
"""

import io
import json
import time

import pytest
from docx import Document

from aligner.api import create_app
from aligner.api.handlers import run_translation_async_wrapper
from aligner.api.session_state import SessionStateManager
from aligner.config import AlignerConfig
from aligner.core.docx import WordExporter
from aligner.core.exceptions import ExportFailedError, TRANSLATION_FAILED_MESSAGE
from aligner.core.translator import SegmentTranslator


RESPONSE = json.dumps([
    {"arabic": "عنوان الكتاب", "english": "the book title"},
    {"arabic": "الفقرة الأولى", "english": "First paragraph"},
    {"arabic": "الفقرة الثانية", "english": "Second paragraph"},
], ensure_ascii=False)


def _build_client(provider_cls, content=RESPONSE, job_starter=run_translation_async_wrapper,
                  exporter=None, export_dir=""):
    config = AlignerConfig(gemini_api_key="test-key", export_dir=export_dir)
    providers = []

    def translator_factory(logger):
        provider = provider_cls(content=content)
        providers.append(provider)
        return SegmentTranslator(provider, logger=logger)

    app, _socketio = create_app(
        config,
        state_manager=SessionStateManager(),
        translator_factory=translator_factory,
        exporter=exporter or WordExporter(),
        job_starter=job_starter
    )
    app.config['TESTING'] = True
    client = app.test_client()
    client.providers = providers
    return client


def new_session(client):
    response = client.post('/api/sessions')
    assert response.status_code == 201
    return response.get_json()['session_id']


@pytest.fixture
def build_client(fake_provider_factory):
    def factory(**kwargs):
        return _build_client(fake_provider_factory, **kwargs)
    return factory


class TestInterfaceRoutes:

    def test_health(self, build_client):
        data = build_client().get('/api/health').get_json()
        assert data['status'] == "ok"

    def test_public_config(self, build_client):
        data = build_client().get('/api/config').get_json()
        assert data['export_label'] == "(Arabic + English)"
        assert "test-key" not in json.dumps(data)

    def test_interface_page(self, build_client):
        response = build_client().get('/')
        assert response.status_code == 200
        assert b"<textarea" in response.data

    def test_unknown_route_is_json_404(self, build_client):
        response = build_client().get('/api/nope')
        assert response.status_code == 404
        assert response.get_json()['error']


class TestTranslateFlow:

    def test_translate_then_export(self, build_client):
        client = build_client()
        session_id = new_session(client)

        response = client.post(f'/api/sessions/{session_id}/translate', json={"text": "عنوان\n\nفقرة"})
        assert response.status_code == 202

        snapshot = client.get(f'/api/sessions/{session_id}').get_json()
        assert snapshot['phase'] == "succeeded"
        # The interface shows the title exactly as returned; only the export title-cases it
        assert snapshot['title'] == {"arabic": "عنوان الكتاب", "english": "the book title"}
        assert [row['english'] for row in snapshot['rows']] == ["First paragraph", "Second paragraph"]
        assert snapshot['can_export'] is True

        response = client.post(f'/api/sessions/{session_id}/export')
        assert response.status_code == 200
        assert response.mimetype == (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )
        disposition = response.headers['Content-Disposition']
        assert disposition.startswith("attachment")
        assert "The Book Title (Arabic + English).docx" in disposition

        doc = Document(io.BytesIO(response.data))
        assert doc.paragraphs[1].text == "The Book Title"
        assert len(doc.tables[0].rows) == 2

    def test_empty_text_rejected_without_service_call(self, build_client):
        client = build_client()
        session_id = new_session(client)

        response = client.post(f'/api/sessions/{session_id}/translate', json={"text": "   "})
        assert response.status_code == 400
        assert response.get_json()['error'] == "Please enter some Arabic text to translate."
        assert client.providers == []

    def test_non_string_text_rejected(self, build_client):
        client = build_client()
        session_id = new_session(client)
        response = client.post(f'/api/sessions/{session_id}/translate', json={"text": 42})
        assert response.status_code == 400

    def test_malformed_model_output(self, build_client):
        client = build_client(content='[{"arabic": "أ"')
        session_id = new_session(client)

        client.post(f'/api/sessions/{session_id}/translate', json={"text": "نص أصلي"})

        snapshot = client.get(f'/api/sessions/{session_id}').get_json()
        assert snapshot['phase'] == "failed"
        assert snapshot['error'] == TRANSLATION_FAILED_MESSAGE
        assert snapshot['source_text'] == "نص أصلي"
        assert snapshot['rows'] == []
        assert snapshot['can_export'] is False

    def test_translate_while_running_conflicts(self, build_client):
        started = []
        client = build_client(job_starter=lambda *args: started.append(args))
        session_id = new_session(client)

        first = client.post(f'/api/sessions/{session_id}/translate', json={"text": "نص"})
        second = client.post(f'/api/sessions/{session_id}/translate', json={"text": "نص"})

        assert first.status_code == 202
        assert first.get_json()['phase'] == "translating"
        assert second.status_code == 409
        assert len(started) == 1

    def test_unknown_session(self, build_client):
        client = build_client()
        response = client.post('/api/sessions/sess_missing/translate', json={"text": "نص"})
        assert response.status_code == 404

    def test_delete_session(self, build_client):
        client = build_client()
        session_id = new_session(client)
        assert client.delete(f'/api/sessions/{session_id}').status_code == 200
        assert client.get(f'/api/sessions/{session_id}').status_code == 404


class TestExportErrors:

    def test_export_before_translation(self, build_client):
        client = build_client()
        session_id = new_session(client)

        response = client.post(f'/api/sessions/{session_id}/export')
        assert response.status_code == 400
        assert response.get_json()['error'] == "There is nothing to export."

    def test_export_failure_keeps_results(self, build_client):
        class BrokenExporter(WordExporter):
            def export(self, pairs):
                raise ExportFailedError()

        client = build_client(exporter=BrokenExporter())
        session_id = new_session(client)
        client.post(f'/api/sessions/{session_id}/translate', json={"text": "نص"})

        response = client.post(f'/api/sessions/{session_id}/export')
        assert response.status_code == 500
        assert response.get_json()['error'] == "Failed to generate the Word document."

        snapshot = client.get(f'/api/sessions/{session_id}').get_json()
        assert snapshot['phase'] == "succeeded"
        assert snapshot['exporting'] is False
        assert snapshot['error'] == "Failed to generate the Word document."
        assert snapshot['can_export'] is True
        assert len(snapshot['rows']) == 2

    def test_unexpected_exporter_error_releases_export_flag(self, build_client):
        class CrashingExporter(WordExporter):
            def export(self, pairs):
                raise RuntimeError("unexpected")

        client = build_client(exporter=CrashingExporter())
        session_id = new_session(client)
        client.post(f'/api/sessions/{session_id}/translate', json={"text": "نص"})

        first = client.post(f'/api/sessions/{session_id}/export')
        second = client.post(f'/api/sessions/{session_id}/export')

        assert first.status_code == 500
        assert first.get_json()['error'] == "Failed to generate the Word document."
        assert second.status_code == 500
        snapshot = client.get(f'/api/sessions/{session_id}').get_json()
        assert snapshot['exporting'] is False

    def test_unreadable_archive_directory(self, build_client, tmp_path, monkeypatch):
        def denied(output_path):
            raise PermissionError("permission denied")

        monkeypatch.setattr("aligner.core.docx.exporter.get_unique_output_path", denied)
        client = build_client(export_dir=str(tmp_path))
        session_id = new_session(client)
        client.post(f'/api/sessions/{session_id}/translate', json={"text": "نص"})

        response = client.post(f'/api/sessions/{session_id}/export')
        assert response.status_code == 500
        assert client.get(f'/api/sessions/{session_id}').get_json()['exporting'] is False

    def test_export_is_archived(self, build_client, tmp_path):
        client = build_client(export_dir=str(tmp_path))
        session_id = new_session(client)
        client.post(f'/api/sessions/{session_id}/translate', json={"text": "نص"})

        assert client.post(f'/api/sessions/{session_id}/export').status_code == 200
        assert [p.name for p in tmp_path.iterdir()] == ["The Book Title (Arabic + English).docx"]

    def test_page_keeps_export_error_visible(self, build_client):
        script = build_client().get('/static/js/aligner.js').get_data(as_text=True)
        assert "state.error = body.error" in script


class TestSessionHousekeeping:

    def test_stale_sessions_are_dropped_on_create(self, monkeypatch):
        config = AlignerConfig(gemini_api_key="test-key", export_dir="", session_max_age=60)
        app, _socketio = create_app(config, job_starter=lambda *args: None)
        client = app.test_client()

        old_id = new_session(client)
        later = time.time() + 120
        monkeypatch.setattr("aligner.api.session_state.time.time", lambda: later)
        new_id = new_session(client)

        assert client.get(f'/api/sessions/{old_id}').status_code == 404
        assert client.get(f'/api/sessions/{new_id}').status_code == 200
