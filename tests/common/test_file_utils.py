from common.file_utils import copy_file_if_present, remove_directory_tree, write_text_file


def test_remove_directory_tree_removes_nested_content(tmp_path):
    target = tmp_path / "backend"
    (target / "src" / "api").mkdir(parents=True)
    (target / "src" / "api" / "index.ts").write_text("export {}", encoding="utf-8")
    (target / "package.json").write_text("{}", encoding="utf-8")

    remove_directory_tree(target)

    assert not target.exists()
    assert tmp_path.exists()


def test_remove_directory_tree_missing_path_is_not_an_error(tmp_path, mock_logger):
    remove_directory_tree(tmp_path / "missing", current_logger=mock_logger)

    mock_logger.debug.assert_called_once()


def test_remove_directory_tree_unlinks_a_file(tmp_path):
    target = tmp_path / "backend"
    target.write_text("not a directory", encoding="utf-8")

    remove_directory_tree(target)

    assert not target.exists()


def test_copy_file_if_present_copies(tmp_path):
    source = tmp_path / "templates" / "README.backend.md"
    source.parent.mkdir()
    source.write_text("# Backend\n", encoding="utf-8")
    destination = tmp_path / "backend" / "README.md"

    assert copy_file_if_present(source, destination) is True
    assert destination.read_text(encoding="utf-8") == "# Backend\n"


def test_copy_file_if_present_without_source(tmp_path):
    destination = tmp_path / "README.md"

    assert copy_file_if_present(tmp_path / "missing.md", destination) is False
    assert not destination.exists()


def test_write_text_file_creates_parents(tmp_path, app_settings, mock_logger):
    env_path = tmp_path / "backend" / ".env"

    write_text_file(env_path, "NODE_ENV=development\n", app_settings, mock_logger)

    assert env_path.read_text(encoding="utf-8") == "NODE_ENV=development\n"
    mock_logger.debug.assert_called_once()
