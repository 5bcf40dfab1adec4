from mdpreview.di.container import Container
from mdpreview.services.config.app_config import build_app_config
from mdpreview.services.source_buffer import DraftSession


def test_container_wires_services_and_registers_encoders(tmp_path, draft_store):
    c = Container(config=build_app_config(project_root=tmp_path), store=draft_store)
    assert c.renderer is not None
    assert c.file_service is not None
    assert c.draft_store is draft_store
    formats = sorted(e.format.value for e in c.registry.all())
    assert formats == ["html", "markdown", "pdf", "text"]


def test_container_uses_configured_preview_style(tmp_path, draft_store):
    ini = tmp_path / "c.ini"
    ini.write_text("[preview]\nstyle = monokai\nfont_size = 20\n", encoding="utf-8")
    c = Container(config=build_app_config(explicit_ini=ini, project_root=tmp_path), store=draft_store)
    assert c.highlighter.style == "monokai"
    assert c.renderer.settings.font_size == 20


def test_container_builds_fresh_sessions(tmp_path, draft_store):
    c = Container(config=build_app_config(project_root=tmp_path), store=draft_store)
    s1, s2 = c.build_session(), c.build_session()
    assert isinstance(s1, DraftSession)
    assert s1 is not s2
    assert s1.store is draft_store
