import pytest

from frontend.scan_flow import InvalidTransition, ScanSession, ScanState


def test_happy_path_to_existing_product():
    scan = ScanSession()
    assert scan.state is ScanState.IDLE

    scan.start()
    assert scan.state is ScanState.SCANNING

    scan.decoded("123")
    assert scan.state is ScanState.DECODED
    assert scan.barcode == "123"

    scan.resolve(exists=True)
    assert scan.state is ScanState.EXISTING


def test_unknown_barcode_goes_to_new_product_form():
    scan = ScanSession().start().decoded("999").resolve(exists=False)
    assert scan.state is ScanState.NEW
    assert scan.barcode == "999"


def test_cancel_returns_to_idle():
    scan = ScanSession().start().cancel()
    assert scan.state is ScanState.IDLE
    assert scan.barcode is None


@pytest.mark.parametrize(
    "steps",
    [
        lambda s: s.decoded("1"),
        lambda s: s.resolve(True),
        lambda s: s.start().start(),
        lambda s: s.start().resolve(True),
    ],
)
def test_invalid_transitions(steps):
    with pytest.raises(InvalidTransition):
        steps(ScanSession())


def test_finished_scan_can_start_again():
    scan = ScanSession().start().decoded("1").resolve(True)
    scan.start()
    assert scan.state is ScanState.SCANNING
    assert scan.barcode is None


def test_session_storage_round_trip():
    scan = ScanSession().start().decoded("42")
    data = scan.to_dict()
    assert data == {"state": "decoded", "barcode": "42"}
    assert ScanSession.from_dict(data) == scan
    assert ScanSession.from_dict(None) == ScanSession()
