import io
import json
import pprint
import pytest
import logging

from pathlib import Path
from deepdiff import DeepDiff

from vplslink.iplink.utils import utils
from vplslink.iplink.linkutil import get_link_util
from vplslink.nlmanager.nlpacket import AttributeList, Link, parse_rtattr

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

OUTPUT_DIR = Path(__file__).parent / "output"

# ifname <-> ifindex of the fake host used by the tests
FAKE_INTERFACES = {
    "eth0": 2,
    "swp1": 7,
    "swp2": 8,
}


def assert_identical_json(json1, json2):
    """
    Compares two JSON objects using deepdiff.

    :param json1: First JSON object to compare.
    :param json2: Second JSON object to compare.
    :return: True if JSON objects are identical, False otherwise.
    """
    if diff := DeepDiff(json1, json2, ignore_order=True):
        try:
            logger.error(f"JSON objects are not identical - deepdiff: {json.dumps(diff, indent=4)}")
        except TypeError:
            logger.error(f"JSON objects are not identical - deepdiff: {pprint.pformat(diff)}")

        assert json1 == json2


@pytest.fixture(autouse=True)
def fake_interfaces(monkeypatch):
    """ Interface name resolution never reaches the host """
    by_index = {ifindex: ifname for ifname, ifindex in FAKE_INTERFACES.items()}

    monkeypatch.setattr(utils, "if_nametoindex", lambda ifname: FAKE_INTERFACES.get(ifname, 0))
    monkeypatch.setattr(utils, "if_indextoname", lambda ifindex: by_index.get(ifindex))

    return FAKE_INTERFACES


@pytest.fixture
def vpls():
    return get_link_util("vpls")


@pytest.fixture
def info_data():
    return AttributeList(maxattr=Link.IFLA_VPLS_MAX)


@pytest.fixture
def err():
    return io.StringIO()


@pytest.fixture
def encode(vpls, info_data, err):
    """ Encode a "type vpls" argument string, return the IFLA_INFO_DATA list """
    def _encode(args):
        vpls.parse_opt(args.split(), info_data, err)
        return info_data

    return _encode


@pytest.fixture
def render(vpls):
    """ Render an IFLA_INFO_DATA list (or raw bytes) the way "ip -d link show" does """
    def _render(attrs):
        if isinstance(attrs, AttributeList):
            attrs = attrs.encode()

        f = io.StringIO()
        vpls.print_opt(parse_rtattr(attrs, Link.IFLA_VPLS_MAX), f)
        return f.getvalue()

    return _render


@pytest.fixture
def get_json():
    def _get_json(file_name):
        file_path = OUTPUT_DIR / file_name

        logger.info(f"get_json: {file_path}")

        with open(file_path, "r") as f:
            return json.load(f)

    return _get_json
