from click.testing import CliRunner

from teeny.cli import EXAMPLE_FILES, cli


def test_init_scaffolds_project(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["init"], catch_exceptions=False)

    assert result.exit_code == 0
    for rel_path, content in EXAMPLE_FILES.items():
        assert (tmp_path / rel_path).read_text(encoding="utf-8") == content
    assert "Created pages/index.md" in result.output


def test_init_twice_keeps_existing_content(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    runner.invoke(cli, ["init"], catch_exceptions=False)
    (tmp_path / "pages" / "index.md").write_text("# Mine", encoding="utf-8")
    (tmp_path / "static" / "extra.css").write_text("p{}", encoding="utf-8")

    result = runner.invoke(cli, ["init"], catch_exceptions=False)

    assert result.exit_code == 0
    assert (tmp_path / "pages" / "index.md").read_text(encoding="utf-8") == "# Mine"
    assert (tmp_path / "static" / "extra.css").exists()
    assert "Created" not in result.output


def test_init_reports_unwritable_example_and_continues(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "pages").write_text("not a directory", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["init"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Could not write pages/index.md" in result.output
    assert "Created pages/index.md" not in result.output
    assert (tmp_path / "pages").read_text(encoding="utf-8") == "not a directory"
    assert (tmp_path / "templates" / "default.html").exists()


def test_init_then_build(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    runner.invoke(cli, ["init"], catch_exceptions=False)

    result = runner.invoke(cli, ["build"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Built 1 pages" in result.output
    index = (tmp_path / "public" / "index.html").read_text(encoding="utf-8")
    assert "<p>My first Teeny page</p>" in index
    assert "<title>Hello World</title>" in index
    assert (tmp_path / "public" / "main.js").exists()


def test_build_fails_on_template_without_html(monkeypatch, project):
    (project / "templates" / "homepage.html").write_text(
        '<div id="page-content"></div>', encoding="utf-8"
    )
    monkeypatch.chdir(project)

    result = CliRunner().invoke(cli, ["build"])

    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "templates/homepage.html" in result.output


def test_build_without_pages_dir(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Expected pages directory" in result.output


def test_unknown_command(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["deploy"])
    assert result.exit_code == 1
    assert "Command 'teeny deploy' does not exist." in result.output


def test_missing_command(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 1
    assert "Missing command" in result.output


def test_develop_port_argument_and_config(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    called = []

    async def fake_develop(project_root, port, mode="incremental"):
        called.append((project_root, port, mode))

    monkeypatch.setattr("teeny.server.develop", fake_develop)
    runner = CliRunner()

    assert runner.invoke(cli, ["develop"], catch_exceptions=False).exit_code == 0
    assert runner.invoke(cli, ["develop", "9000"], catch_exceptions=False).exit_code == 0
    (tmp_path / "teeny.yaml").write_text("port: 8100\nwatch: restart\n", encoding="utf-8")
    assert runner.invoke(cli, ["develop"], catch_exceptions=False).exit_code == 0

    assert [(port, mode) for _, port, mode in called] == [
        (8000, "incremental"),
        (9000, "incremental"),
        (8100, "restart"),
    ]
    assert called[0][0] == tmp_path


def test_develop_rejects_unknown_watch_mode(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "teeny.yaml").write_text("watch: psychic\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["develop"])
    assert result.exit_code == 1
    assert "Unknown watch mode" in result.output


def test_module_main_entrypoint():
    from teeny.__main__ import main

    assert callable(main)


def test_main_invokes_cli(monkeypatch):
    import teeny.cli as cli_mod

    called = {}

    def fake_cli():
        called["ran"] = True

    monkeypatch.setattr(cli_mod, "cli", fake_cli)
    cli_mod.main()
    assert called == {"ran": True}


def test_develop_exits_on_template_without_html(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    from teeny.templates import TemplateStructureError

    async def failing_develop(project_root, port, mode="incremental"):
        raise TemplateStructureError(
            "templates/default.html", "templates should contain the 'html' tag"
        )

    monkeypatch.setattr("teeny.server.develop", failing_develop)
    result = CliRunner().invoke(cli, ["develop"])

    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "templates/default.html" in result.output
