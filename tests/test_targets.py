from __future__ import annotations

import pytest

from scanport.errors import InvalidArgument, InvalidSubnet
from scanport.targets import expand_targets, parse_subnet


def test_expand_single_subnet() -> None:
    targets = expand_targets(['10.0.0.0/24'], 80)
    assert len(targets) == 254
    assert [t.address for t in targets] == [f'10.0.0.{i}' for i in range(1, 255)]
    assert {t.port for t in targets} == {80}


def test_nonzero_host_octet_is_normalized() -> None:
    targets = expand_targets(['10.0.0.1/24'], 22)
    assert targets[0].address == '10.0.0.1'
    assert targets[-1].address == '10.0.0.254'
    assert targets == expand_targets(['10.0.0.0/24'], 22)


def test_subnets_keep_given_order() -> None:
    targets = expand_targets(['10.60.3.0/24', '192.168.1.0/24'], 8090)
    assert len(targets) == 508
    assert targets[253].address == '10.60.3.254'
    assert targets[254].address == '192.168.1.1'


def test_network_and_broadcast_excluded() -> None:
    addresses = {t.address for t in expand_targets(['172.16.5.0/24'], 443)}
    assert '172.16.5.0' not in addresses
    assert '172.16.5.255' not in addresses


def test_parse_subnet_prefix() -> None:
    assert parse_subnet('10.60.3.0/24') == '10.60.3.'
    assert parse_subnet('010.060.003.000/24') == '10.60.3.'


@pytest.mark.parametrize(
    'spec',
    [
        '10.0.0.0/16',
        '10.0.0.0',
        '10.0.0/24',
        '10.0.0.0.0/24',
        'abc',
        '',
        ' 10.0.0.0/24',
        '10.0.0.0/24 ',
        '256.0.0.0/24',
        '10.0.0.300/24',
        '1000.0.0.0/24',
        '::1/24',
    ],
)
def test_invalid_subnets_rejected(spec: str) -> None:
    with pytest.raises(InvalidSubnet):
        parse_subnet(spec)


def test_one_bad_subnet_rejects_all() -> None:
    with pytest.raises(InvalidArgument, match="Invalid subnet 'nope'"):
        expand_targets(['10.0.0.0/24', 'nope'], 80)
