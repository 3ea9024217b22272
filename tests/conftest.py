import pytest

from logrotor.config import RotationConfig, SinkConfig, SuffixExtension
from logrotor.sink import FileRotationSink


@pytest.fixture
def make_sink(tmp_path):
    """Build sinks writing under tmp_path; all are closed at teardown."""
    sinks = []

    def _make(name="app.log", observer=None, suffix=SuffixExtension.NUMBERING,
              max_file_size=10 * 1024 * 1024, max_archived_files_count=5, **overrides):
        config = SinkConfig(
            file_path=str(tmp_path / name),
            rotation=RotationConfig(
                suffix_extension=suffix,
                max_file_size=max_file_size,
                max_archived_files_count=max_archived_files_count,
            ),
            **overrides,
        )
        sink = FileRotationSink(config, observer=observer)
        sinks.append(sink)
        return sink

    yield _make
    for sink in sinks:
        sink.close()
