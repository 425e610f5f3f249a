import pytest

from lightsailctl import __version__
from lightsailctl.core import VERSION, Semver


def test_version():
    assert __version__ == "1.0.7"
    assert str(VERSION) == "v1.0.7"
    assert VERSION.is_valid()


@pytest.mark.parametrize(
    "value, canonical",
    [
        ("v1.2.3", "v1.2.3"),
        ("1.2.3", "v1.2.3"),
        ("v1", "v1.0.0"),
        ("v1.2", "v1.2.0"),
        ("v1.2.3-rc.1", "v1.2.3-rc.1"),
        ("v1.2.3+build.5", "v1.2.3"),
        ("v1.2.3-rc.1+build.5", "v1.2.3-rc.1"),
    ],
)
def test_canonical(value: str, canonical: str):
    assert Semver(value).is_valid()
    assert Semver(value).canonical() == canonical


@pytest.mark.parametrize(
    "value", ["", "v", "vx.y.z", "v01.2.3", "v1.2.3-01", "v1.2.3.4", "v1.2-rc"]
)
def test_invalid(value: str):
    assert not Semver(value).is_valid()
    assert Semver(value).canonical() == ""


@pytest.mark.parametrize(
    "lower, higher",
    [
        ("v1.0.6", "v1.0.7"),
        ("v1.0.9", "v1.0.10"),
        ("v1.9.0", "v2.0.0"),
        ("v1.0.0-alpha", "v1.0.0"),
        ("v1.0.0-alpha", "v1.0.0-alpha.1"),
        ("v1.0.0-alpha.1", "v1.0.0-alpha.beta"),
        ("v1.0.0-beta.2", "v1.0.0-beta.11"),
        ("v1.0.0-rc.1", "v1.0.0"),
        ("garbage", "v0.0.1"),
    ],
)
def test_ordering(lower: str, higher: str):
    assert Semver(lower) < Semver(higher)
    assert Semver(higher) > Semver(lower)


def test_build_metadata_is_ignored_for_equality():
    assert Semver("v1.0.7+abc") == Semver("v1.0.7")
    assert Semver("v1") == Semver("v1.0.0")
