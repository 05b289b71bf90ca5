"""Unit tests for ObservationContext."""

from shared_kernel.observability_context import ObservationContext


def test_as_dict_skips_unset_values():
    context = ObservationContext(request_id="job-1")

    assert context.as_dict() == {"request_id": "job-1"}


def test_with_tenant_returns_new_context():
    context = ObservationContext(request_id="job-1")

    scoped = context.with_tenant("acme")

    assert scoped is not context
    assert scoped.as_dict() == {"request_id": "job-1", "tenant_id": "acme"}
    assert context.tenant_id is None


def test_with_extra_merges_metadata():
    context = ObservationContext(extra={"a": 1}).with_extra(b=2)

    assert context.as_dict() == {"a": 1, "b": 2}
