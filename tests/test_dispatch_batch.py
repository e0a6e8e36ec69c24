import pytest

from src.sharai_client.errors import ApiError, NoValidDocumentsError
from src.sharai_client.pipeline import dispatch_batch


class RecordingSubmit:
    """Fake create-many call that records every batch it receives."""

    def __init__(self, response=None):
        self.calls = []
        self.response = response

    def __call__(self, documents):
        self.calls.append(list(documents))
        if self.response is not None:
            return self.response
        return {"count": len(documents)}


def make_docs(n):
    return [
        {
            "title": f"Doc {i}",
            "content": f"Content {i}",
            "type": "fiqh",
            "sources": [{"title": "S", "text": "T"}],
        }
        for i in range(n)
    ]


def test_small_set_submitted_whole_in_one_call():
    docs = make_docs(50)
    submit = RecordingSubmit()

    result = dispatch_batch(docs, submit)

    assert len(submit.calls) == 1
    assert submit.calls[0] == docs
    assert result.submitted == 50
    assert result.remaining == 0
    assert result.imported_count == 50
    assert result.notices == ["50 documents imported successfully"]


def test_large_set_submits_first_batch_only():
    docs = make_docs(120)
    submit = RecordingSubmit()

    result = dispatch_batch(docs, submit)

    # exactly one call, with the first 50 documents
    assert len(submit.calls) == 1
    assert submit.calls[0] == docs[:50]
    assert result.submitted == 50
    assert result.remaining == 70
    assert any(
        "70 additional documents can be imported in a separate operation" in n
        for n in result.notices
    )


def test_offset_continues_with_next_batch():
    docs = make_docs(120)
    submit = RecordingSubmit()

    result = dispatch_batch(docs, submit, offset=100)

    assert submit.calls[0] == docs[100:]
    assert result.submitted == 20
    assert result.remaining == 0
    assert result.offset == 100


def test_custom_batch_size():
    docs = make_docs(5)
    submit = RecordingSubmit()

    result = dispatch_batch(docs, submit, batch_size=2)

    assert [len(c) for c in submit.calls] == [2]
    assert result.remaining == 3


def test_missing_count_in_response():
    submit = RecordingSubmit(response={"status": "ok"})

    result = dispatch_batch(make_docs(3), submit)

    assert result.imported_count is None
    assert result.notices == ["Documents imported successfully"]


def test_empty_documents_raise_without_submitting():
    submit = RecordingSubmit()

    with pytest.raises(NoValidDocumentsError):
        dispatch_batch([], submit)

    assert submit.calls == []


@pytest.mark.parametrize("kwargs", [{"batch_size": 0}, {"offset": -1}, {"offset": 3}])
def test_out_of_range_arguments(kwargs):
    submit = RecordingSubmit()

    with pytest.raises(ValueError):
        dispatch_batch(make_docs(3), submit, **kwargs)

    assert submit.calls == []


def test_submit_failure_propagates_without_retry():
    calls = []

    def failing_submit(documents):
        calls.append(documents)
        raise ApiError(500, "Internal Server Error")

    with pytest.raises(ApiError, match="500"):
        dispatch_batch(make_docs(3), failing_submit)

    assert len(calls) == 1
