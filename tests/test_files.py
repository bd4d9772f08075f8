"""Unit tests for file collaborators and project metadata."""

from pathlib import Path

import pytest

from propfiles.files import LocalFileManager, MemoryFileManager, ProjectPathResolver
from propfiles.metadata import ProjectMetadataService
from propfiles.models import FileEvent, FileEventKind, LogicalPath


class TestProjectPathResolver:
    def test_default_layout(self):
        """
        Given a resolver with the default layout
        When a resources file is resolved
        Then it lands under src/main/resources
        """
        resolver = ProjectPathResolver(Path("/work/app"))
        assert resolver.resolve(LogicalPath.SRC_MAIN_RESOURCES, "a.properties") == str(
            Path("/work/app/src/main/resources/a.properties")
        )

    def test_root_path(self):
        resolver = ProjectPathResolver(Path("/work/app"))
        assert resolver.resolve(LogicalPath.ROOT, "build.properties") == str(
            Path("/work/app/build.properties")
        )

    def test_spring_config_root(self):
        resolver = ProjectPathResolver(Path("/work/app"))
        assert resolver.directory(LogicalPath.SPRING_CONFIG_ROOT) == Path(
            "/work/app/src/main/resources/META-INF/spring"
        )

    def test_layout_override(self):
        """
        Given a layout override for SRC_MAIN_RESOURCES
        When a file is resolved
        Then the override directory is used and other roots keep their defaults
        """
        resolver = ProjectPathResolver(Path("/p"), {LogicalPath.SRC_MAIN_RESOURCES: "conf"})
        assert resolver.resolve(LogicalPath.SRC_MAIN_RESOURCES, "x") == str(Path("/p/conf/x"))
        assert resolver.directory(LogicalPath.SRC_TEST_JAVA) == Path("/p/src/test/java")


class TestLocalFileManager:
    def test_exists(self, tmp_path: Path):
        """
        Given one existing file and one directory
        When exists is called
        Then only the regular file exists
        """
        target = tmp_path / "a.properties"
        target.write_text("a=1\n")
        files = LocalFileManager()
        assert files.exists(str(target)) is True
        assert files.exists(str(tmp_path)) is False
        assert files.exists(str(tmp_path / "missing")) is False

    def test_update_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LocalFileManager().update_file(str(tmp_path / "missing"))

    def test_output_replaces_contents_on_close(self, tmp_path: Path):
        """
        Given an existing file
        When bytes are written to its output stream and the stream is closed
        Then the file holds exactly those bytes and one event was sent
        """
        target = tmp_path / "a.properties"
        target.write_bytes(b"old contents that are longer\n")
        files = LocalFileManager()
        events: list[FileEvent] = []
        files.add_listener(events.append)

        session = files.update_file(str(target))
        with session.open_input() as stream:
            assert stream.read() == b"old contents that are longer\n"
        with session.open_output() as stream:
            stream.write(b"new\n")
            assert target.read_bytes() == b"old contents that are longer\n"

        assert target.read_bytes() == b"new\n"
        assert events == [FileEvent(kind=FileEventKind.UPDATED, identifier=str(target))]

    def test_removed_listener_is_not_called(self, tmp_path: Path):
        target = tmp_path / "a.properties"
        target.write_text("")
        files = LocalFileManager()
        events: list[FileEvent] = []
        files.add_listener(events.append)
        files.remove_listener(events.append)

        with files.update_file(str(target)).open_output() as stream:
            stream.write(b"x=1\n")

        assert events == []


class TestMemoryFileManager:
    def test_text_is_encoded_latin1(self):
        files = MemoryFileManager({"f": "café=1\n"})
        assert files.read("f") == "café=1\n".encode("iso-8859-1")
        assert files.read_text("f") == "café=1\n"

    def test_output_commits_on_close(self):
        """
        Given an in-memory file
        When its output stream is written and closed
        Then the new bytes replace the old ones and listeners hear about it
        """
        files = MemoryFileManager({"f": "a=1\n"})
        events: list[FileEvent] = []
        files.add_listener(events.append)

        with files.update_file("f").open_output() as stream:
            stream.write(b"b=2\n")

        assert files.read("f") == b"b=2\n"
        assert len(events) == 1

    def test_write_does_not_notify(self):
        files = MemoryFileManager()
        events: list[FileEvent] = []
        files.add_listener(events.append)
        files.write("f", b"")
        assert files.exists("f")
        assert events == []

    def test_delete(self):
        files = MemoryFileManager({"f": ""})
        files.delete("f")
        assert files.exists("f") is False
        with pytest.raises(FileNotFoundError):
            files.update_file("f")


class TestProjectMetadataService:
    def test_no_build_file(self, tmp_path: Path):
        assert ProjectMetadataService(tmp_path).get("MID:project#the_project") is None

    def test_build_file_present(self, tmp_path: Path):
        """
        Given a directory with pom.xml
        When project metadata is requested
        Then it names the root and the build file
        """
        (tmp_path / "pom.xml").write_text("<project/>")
        metadata = ProjectMetadataService(tmp_path).get("MID:project#the_project")
        assert metadata is not None
        assert metadata.root == tmp_path
        assert metadata.build_file == tmp_path / "pom.xml"

    def test_unknown_identifier(self, tmp_path: Path):
        (tmp_path / "pom.xml").write_text("<project/>")
        assert ProjectMetadataService(tmp_path).get("MID:other") is None
