import threading

from import_worker import ImportJob


def test_job_reads_on_background_thread():
    seen = {}

    def reader(path):
        seen["thread"] = threading.current_thread()
        return f"content of {path}"

    job = ImportJob("a.csv", reader).start()
    assert job.wait(5)
    assert job.content == "content of a.csv"
    assert job.error is None
    assert seen["thread"] is not threading.main_thread()


def test_job_captures_reader_errors():
    def reader(path):
        raise FileNotFoundError(path)

    job = ImportJob("missing.csv", reader).start()
    assert job.wait(5)
    assert job.content is None
    assert isinstance(job.error, FileNotFoundError)


def test_job_is_not_done_before_start():
    job = ImportJob("a.csv", lambda p: "")
    assert job.done is False
    assert job.wait(0) is False
