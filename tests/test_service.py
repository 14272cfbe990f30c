"""Tests for the kudos service: validation, filtering and moderation."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from kudos.board.errors import (
    BannedContentError,
    DuplicateSubmissionError,
    EmptyMessageError,
    KudoNotFoundError,
    MessageTooLongError,
    MissingFieldError,
    RecipientNotFoundError,
    SelfRecipientError,
    UnauthorizedError,
)
from kudos.board.models import Kudo
from kudos.board.seed import demo_kudos
from kudos.board.service import KudosService
from kudos.directory.store import UserDirectory
from kudos.moderation.filters import ContentFilter, DuplicateGuard
from kudos.security.audit_log import AuditLogger

ADMIN = "u0"


class _Clock:
    """Manually advanced clock."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


def _service(clock=None, **kwargs):
    return KudosService(
        directory=UserDirectory(),
        audit=kwargs.pop("audit", AuditLogger()),
        clock=clock or _Clock(),
        **kwargs,
    )


# --- Create: validation ---


def test_create_returns_enriched_view():
    svc = _service()
    view = svc.create("u1", "u2", "Great job!")
    assert view.kudo.id == "k1"
    assert view.kudo.message == "Great job!"
    assert view.kudo.is_visible
    assert view.kudo.moderated_by is None
    assert view.kudo.moderated_at is None
    assert view.kudo.moderation_reason is None
    assert view.sender.name == "Jordan Lee"
    assert view.recipient.name == "Priya Desai"


def test_create_trims_message():
    view = _service().create("u1", "u2", "   Nice work   ")
    assert view.kudo.message == "Nice work"


def test_self_kudos_rejected():
    for user_id in ("u0", "u1", "u5"):
        with pytest.raises(SelfRecipientError):
            _service().create(user_id, user_id, "Thanks me")


def test_missing_fields_rejected():
    svc = _service()
    with pytest.raises(MissingFieldError):
        svc.create("u1", None, "Hi")
    with pytest.raises(MissingFieldError):
        svc.create("u1", "", "Hi")
    with pytest.raises(MissingFieldError):
        svc.create("u1", "u2", None)
    assert len(svc) == 0


def test_unknown_recipient_rejected():
    with pytest.raises(RecipientNotFoundError):
        _service().create("u1", "u99", "Hello")


def test_empty_message_rejected():
    svc = _service()
    with pytest.raises(EmptyMessageError):
        svc.create("u1", "u2", "")
    with pytest.raises(EmptyMessageError):
        svc.create("u1", "u2", "   \n\t ")


def test_byte_order_mark_counts_as_whitespace():
    svc = _service()
    with pytest.raises(EmptyMessageError):
        svc.create("u1", "u2", "\ufeff")
    view = svc.create("u1", "u2", "\ufeff Thanks! \u3000")
    assert view.kudo.message == "Thanks!"


def test_message_length_boundaries():
    svc = _service()
    with pytest.raises(MessageTooLongError):
        svc.create("u1", "u2", "a" * 501)
    view = svc.create("u1", "u2", "a" * 500)
    assert len(view.kudo.message) == 500


def test_length_is_measured_after_trimming():
    view = _service().create("u1", "u2", "  " + "b" * 500 + "  ")
    assert view.kudo.message == "b" * 500


def test_custom_max_length():
    svc = _service(max_message_length=10)
    with pytest.raises(MessageTooLongError) as exc:
        svc.create("u1", "u2", "x" * 11)
    assert "10 characters" in exc.value.message


def test_banned_content_any_case():
    svc = _service()
    for msg in ("this is SPAM", "Test123 passed", "so InApPrOpRiAtE"):
        with pytest.raises(BannedContentError):
            svc.create("u1", "u2", msg)
    assert len(svc) == 0


def test_custom_deny_list():
    svc = _service(content_filter=ContentFilter(["rubbish"]))
    svc.create("u1", "u2", "spam is fine here")
    with pytest.raises(BannedContentError):
        svc.create("u1", "u3", "What RUBBISH")


def test_message_is_html_escaped():
    view = _service().create("u1", "u2", "<b>\"Tom\" & 'Jerry'</b>")
    assert view.kudo.message == "&lt;b&gt;&quot;Tom&quot; &amp; &#039;Jerry&#039;&lt;/b&gt;"
    for ch in "<>\"'":
        assert ch not in view.kudo.message


def test_stored_message_not_escaped_twice_on_read():
    svc = _service()
    created = svc.create("u1", "u2", "A & B")
    assert svc.get(created.id).kudo.message == "A &amp; B"
    assert svc.list_kudos()[0].kudo.message == "A &amp; B"


def test_validation_order_self_before_recipient_lookup():
    with pytest.raises(SelfRecipientError):
        _service().create("u99", "u99", "hi")


# --- Create: duplicate guard ---


def test_duplicate_within_window_rejected():
    clock = _Clock()
    svc = _service(clock=clock)
    svc.create("u1", "u2", "Great job!")
    clock.advance(59)
    with pytest.raises(DuplicateSubmissionError):
        svc.create("u1", "u2", "  Great job!  ")
    assert len(svc) == 1


def test_duplicate_after_window_allowed():
    clock = _Clock()
    svc = _service(clock=clock)
    svc.create("u1", "u2", "Great job!")
    clock.advance(60)
    view = svc.create("u1", "u2", "Great job!")
    assert view.kudo.id == "k2"


def test_duplicate_guard_only_matches_same_triple():
    svc = _service()
    svc.create("u1", "u2", "Great job!")
    svc.create("u1", "u2", "Great job again!")
    svc.create("u1", "u3", "Great job!")
    svc.create("u3", "u2", "Great job!")
    assert len(svc) == 4


def test_duplicate_detected_for_escaped_messages():
    svc = _service()
    svc.create("u1", "u2", "R&D <3")
    with pytest.raises(DuplicateSubmissionError):
        svc.create("u1", "u2", "R&D <3")


def test_duplicate_window_is_configurable():
    clock = _Clock()
    svc = _service(clock=clock, duplicate_guard=DuplicateGuard(window_seconds=5))
    svc.create("u1", "u2", "Thanks")
    clock.advance(6)
    svc.create("u1", "u2", "Thanks")
    assert len(svc) == 2


# --- Ids ---


def test_ids_never_reused_after_delete():
    svc = _service()
    first = svc.create("u1", "u2", "one")
    svc.delete(first.id, ADMIN)
    second = svc.create("u1", "u2", "two")
    assert second.id != first.id


def test_ids_skip_seeded_kudos():
    svc = _service(initial=demo_kudos())
    view = svc.create("u1", "u4", "hello")
    assert view.id == "k3"


def test_duplicate_initial_ids_rejected():
    now = datetime.now(timezone.utc)
    kudo = Kudo(id="k1", sender_id="u1", recipient_id="u2", message="x", created_at=now)
    with pytest.raises(ValueError):
        _service(initial=[kudo, kudo])


# --- List ---


def test_list_newest_first():
    clock = _Clock()
    svc = _service(clock=clock)
    svc.create("u1", "u2", "first")
    clock.advance(10)
    svc.create("u1", "u3", "second")
    clock.advance(10)
    svc.create("u2", "u3", "third")
    messages = [v.kudo.message for v in svc.list_kudos()]
    assert messages == ["third", "second", "first"]


def test_list_excludes_hidden_for_everyone():
    svc = _service()
    keep = svc.create("u1", "u2", "keep")
    gone = svc.create("u1", "u3", "hide me")
    svc.hide(gone.id, ADMIN)
    for viewer_is_admin in (False, True):
        ids = [v.id for v in svc.list_kudos(viewer_is_admin=viewer_is_admin)]
        assert ids == [keep.id]
        assert all(v.kudo.is_visible for v in svc.list_kudos(viewer_is_admin))


def test_list_returns_copies():
    svc = _service()
    svc.create("u1", "u2", "original")
    view = svc.list_kudos()[0]
    view.kudo.message = "tampered"
    view.kudo.is_visible = False
    assert svc.list_kudos()[0].kudo.message == "original"


def test_seeded_kudos_are_listed():
    svc = _service(initial=demo_kudos())
    ids = [v.id for v in svc.list_kudos()]
    assert ids == ["k1", "k2"]


# --- Moderation ---


def test_hide_sets_moderation_fields():
    clock = _Clock()
    svc = _service(clock=clock)
    view = svc.create("u1", "u2", "hello")
    clock.advance(30)
    hidden = svc.hide(view.id, ADMIN, reason="off topic")
    assert not hidden.kudo.is_visible
    assert hidden.kudo.moderated_by == ADMIN
    assert hidden.kudo.moderated_at == clock.now
    assert hidden.kudo.moderation_reason == "off topic"


def test_hide_without_reason_stores_none():
    svc = _service()
    view = svc.create("u1", "u2", "hello")
    assert svc.hide(view.id, ADMIN).kudo.moderation_reason is None
    assert svc.hide(view.id, ADMIN, reason="").kudo.moderation_reason is None


def test_hide_twice_restamps():
    clock = _Clock()
    svc = _service(clock=clock)
    view = svc.create("u1", "u2", "hello")
    svc.hide(view.id, ADMIN, reason="first")
    clock.advance(5)
    again = svc.hide(view.id, ADMIN, reason="second")
    assert again.kudo.moderated_at == clock.now
    assert again.kudo.moderation_reason == "second"


def test_hide_by_non_admin_unauthorized():
    svc = _service()
    view = svc.create("u1", "u2", "hello")
    with pytest.raises(UnauthorizedError):
        svc.hide(view.id, "u1")
    assert svc.get(view.id).kudo.is_visible


def test_non_admin_checked_before_lookup():
    with pytest.raises(UnauthorizedError):
        _service().hide("k404", "u2")


def test_hide_then_unhide_restores():
    svc = _service()
    view = svc.create("u1", "u2", "hello")
    svc.hide(view.id, ADMIN, reason="test")
    restored = svc.unhide(view.id, ADMIN)
    assert restored.kudo.is_visible
    assert restored.kudo.moderated_by is None
    assert restored.kudo.moderated_at is None
    assert restored.kudo.moderation_reason is None


def test_unhide_by_non_admin_unauthorized():
    svc = _service()
    view = svc.create("u1", "u2", "hello")
    svc.hide(view.id, ADMIN)
    with pytest.raises(UnauthorizedError):
        svc.unhide(view.id, "u3")
    assert not svc.get(view.id).kudo.is_visible


def test_delete_removes_and_later_ops_not_found():
    svc = _service()
    view = svc.create("u1", "u2", "hello")
    svc.delete(view.id, ADMIN)
    with pytest.raises(KudoNotFoundError):
        svc.hide(view.id, ADMIN)
    with pytest.raises(KudoNotFoundError):
        svc.unhide(view.id, ADMIN)
    with pytest.raises(KudoNotFoundError):
        svc.delete(view.id, ADMIN)
    with pytest.raises(KudoNotFoundError):
        svc.get(view.id)
    assert svc.list_kudos() == []


def test_delete_hidden_kudo():
    svc = _service()
    view = svc.create("u1", "u2", "hello")
    svc.hide(view.id, ADMIN)
    svc.delete(view.id, ADMIN)
    assert len(svc) == 0


def test_delete_by_non_admin_unauthorized():
    svc = _service()
    view = svc.create("u1", "u2", "hello")
    with pytest.raises(UnauthorizedError):
        svc.delete(view.id, "u1")
    assert len(svc) == 1


# --- Audit ---


def test_moderation_actions_are_audited():
    audit = AuditLogger()
    svc = _service(audit=audit)
    view = svc.create("u1", "u2", "hello")
    svc.hide(view.id, ADMIN, reason="test")
    svc.unhide(view.id, ADMIN)
    svc.delete(view.id, ADMIN)
    actions = [e.action for e in audit.get_events_for_kudo(view.id)]
    assert actions == ["DELETE", "UNHIDE", "HIDE"]
    hide_entry = audit.get_events(action="HIDE")[0]
    assert hide_entry.admin_id == ADMIN
    assert hide_entry.reason == "test"


def test_failed_moderation_not_audited():
    audit = AuditLogger()
    svc = _service(audit=audit)
    view = svc.create("u1", "u2", "hello")
    with pytest.raises(UnauthorizedError):
        svc.hide(view.id, "u1")
    with pytest.raises(KudoNotFoundError):
        svc.hide("k999", ADMIN)
    assert audit.get_events() == []


class _BrokenAudit(AuditLogger):
    def record(self, action, kudo_id, admin_id, reason=None):
        raise RuntimeError("disk on fire")


def test_audit_failure_does_not_block_moderation():
    svc = _service(audit=_BrokenAudit())
    view = svc.create("u1", "u2", "hello")
    assert not svc.hide(view.id, ADMIN).kudo.is_visible
    assert svc.unhide(view.id, ADMIN).kudo.is_visible
    svc.delete(view.id, ADMIN)
    assert len(svc) == 0


# --- End to end ---


def test_full_lifecycle():
    clock = _Clock()
    svc = _service(clock=clock, initial=demo_kudos(clock.now))

    created = svc.create("u1", "u2", "Great job!")
    feed = svc.list_kudos()
    assert feed[0].id == created.id
    assert feed[0].kudo.message == "Great job!"
    assert feed[0].sender.name == "Jordan Lee"
    assert feed[0].recipient.name == "Priya Desai"

    hidden = svc.hide(created.id, ADMIN, reason="test")
    assert created.id not in [v.id for v in svc.list_kudos()]
    assert hidden.kudo.moderated_by == ADMIN
    assert hidden.kudo.moderated_at is not None
    assert hidden.kudo.moderation_reason == "test"

    svc.unhide(created.id, ADMIN)
    assert svc.list_kudos()[0].id == created.id

    svc.delete(created.id, ADMIN)
    assert created.id not in [v.id for v in svc.list_kudos()]
    with pytest.raises(KudoNotFoundError):
        svc.hide(created.id, ADMIN)


# --- Concurrency ---


def test_concurrent_identical_submissions_store_one():
    svc = _service()
    workers = 32
    barrier = threading.Barrier(workers)
    created, rejected = [], []

    def submit():
        barrier.wait()
        try:
            created.append(svc.create("u1", "u2", "Thanks for the help"))
        except DuplicateSubmissionError:
            rejected.append(True)

    threads = [threading.Thread(target=submit) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(svc) == 1
    assert len(created) == 1
    assert len(rejected) == workers - 1


def test_list_never_sees_half_moderated_kudo():
    svc = _service()
    target = svc.create("u1", "u2", "Moving target").id
    svc.create("u2", "u3", "Steady one")
    stop = threading.Event()
    problems = []

    def toggle():
        while not stop.is_set():
            svc.hide(target, ADMIN, reason="review")
            svc.unhide(target, ADMIN)

    def read():
        for _ in range(500):
            for view in svc.list_kudos():
                k = view.kudo
                if not k.is_visible or k.moderated_by or k.moderated_at or k.moderation_reason:
                    problems.append(k)
            k = svc.get(target).kudo
            fields = (k.moderated_by, k.moderated_at, k.moderation_reason)
            if k.is_visible and any(f is not None for f in fields):
                problems.append(k)
            if not k.is_visible and any(f is None for f in fields):
                problems.append(k)

    toggler = threading.Thread(target=toggle)
    readers = [threading.Thread(target=read) for _ in range(4)]
    toggler.start()
    for t in readers:
        t.start()
    for t in readers:
        t.join()
    stop.set()
    toggler.join()

    assert problems == []
