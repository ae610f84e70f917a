import pytest

from policypulse.backends import MemoryBackend
from policypulse.errors import BackendUnavailable, NotFound, Rejected, SignerRequired
from policypulse.runtime import ProposalDraft, ProposalRepository
from policypulse.service import PolicyPulseService, build_service
from policypulse.signer import Signer


def test_submit_refreshes_snapshot(service, draft):
    pid = service.submit(draft)
    assert [r.id for r in service.proposals] == [pid]
    status = service.status.current()
    assert status.status == "success"
    assert status.message == "Encrypted proposal submitted anonymously!"


def test_vote_refreshes_snapshot(service, draft):
    pid = service.submit(draft)
    service.cast_vote(pid, True)
    assert service.proposals[0].upvotes == 1
    assert service.status.current().message == "Vote recorded anonymously!"


def test_rejected_submit_has_distinct_message(backend, draft):
    repo = ProposalRepository(backend, signer=Signer(address="0x1", approve=lambda k, v: False))
    svc = PolicyPulseService(repo)
    with pytest.raises(Rejected):
        svc.submit(draft)
    s = svc.status.current()
    assert s.status == "error"
    assert s.message == "Transaction rejected by user"


def test_failed_submit_message(draft):
    svc = PolicyPulseService(ProposalRepository(MemoryBackend(available=False), signer=Signer(address="0x1")))
    with pytest.raises(BackendUnavailable):
        svc.submit(draft)
    assert svc.status.current().message.startswith("Submission failed: ")


def test_vote_missing_message(service):
    with pytest.raises(NotFound):
        service.cast_vote("missing", False)
    assert service.status.current().message.startswith("Voting failed: ")


def test_signer_required_without_wallet(backend, draft):
    svc = PolicyPulseService(ProposalRepository(backend))
    with pytest.raises(SignerRequired):
        svc.submit(draft)
    pid = svc.submit(draft, Signer(address="0xbob"))
    assert svc.proposals[0].id == pid


def test_view_and_summary(service):
    a = service.submit(ProposalDraft(category="Education", content="school buses"))
    service.submit(ProposalDraft(category="Healthcare", content="clinics"))
    service.cast_vote(a, True)
    assert [r.category for r in service.view("", "Healthcare")] == ["Healthcare"]
    # content is the encoded payload, so search matches the ciphertext text
    assert len(service.view("fhe-")) == 2
    assert service.view("school buses") == []
    summary = service.summary()
    assert (summary.count, summary.total_votes, summary.approval_rate) == (2, 1, 1.0)
    assert summary.most_discussed.id == a


def test_build_service_uses_config(tmp_path):
    cfg = {"backend": {"driver": "json", "path": str(tmp_path / "store.json")}}
    svc = build_service(cfg, signer=Signer(address="0x1"))
    pid = svc.submit(ProposalDraft(category="Economy", content="lower fees"))
    assert (tmp_path / "store.json").exists()
    assert build_service(cfg).refresh().records[0].id == pid
