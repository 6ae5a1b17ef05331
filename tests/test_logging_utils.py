import logging

import numpy as np

from geokernel.elements import PointElement
from geokernel.logging_utils import apply_debug_logging, debug_log_call, summarize


def test_summarize_elements_and_collections():
    a = PointElement.build("A", x=1.0, y=2.0)
    assert summarize(a) == "<point A>"

    scene = {pid: PointElement.build(pid) for pid in "ABCDE"}
    assert summarize(scene) == "elements[5](A, B, C, D, ...)"
    assert summarize((a, 3)) == "(<point A>, 3)"
    assert summarize(np.array([[0.0, 1.0], [np.inf, -2.5]])) == "ndarray(shape=(2, 2)) min=-2.5 max=1"


def test_debug_log_call_traces_at_debug_level(caplog):
    logger = logging.getLogger("geokernel.tests.trace")

    @debug_log_call(logger)
    def shift(point, dx=0.0):
        return point + dx

    with caplog.at_level(logging.DEBUG, logger="geokernel.tests.trace"):
        assert shift(1.0, dx=2.0) == 3.0
    assert "-> " in caplog.text
    assert "shift(1.0, dx=2.0)" in caplog.text
    assert "= 3.0" in caplog.text
    assert debug_log_call(logger)(shift) is shift


def test_apply_debug_logging_wraps_public_functions_only():
    def public():
        return 1

    def _private():
        return 2

    namespace = {"__name__": __name__, "public": public, "_private": _private, "value": 3}
    apply_debug_logging(namespace)
    assert getattr(namespace["public"], "_debug_logging_wrapped", False)
    assert namespace["_private"] is _private
    assert namespace["public"]() == 1
