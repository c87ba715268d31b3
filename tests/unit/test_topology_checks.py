from fabtopo.MODELS.service_definition import Service, ServiceDefinition
from fabtopo.UTILS.topology_checks import check_topology, ordered_startup


def _svc(name, ports=(), depends_on=()):
    return ServiceDefinition(service_name=name, service=Service(ports=list(ports), depends_on=list(depends_on)))


def test_clean_topology():
    definitions = [_svc("a", ["1:1"]), _svc("b", ["2:2"], ["a"]), ServiceDefinition(service_name="c")]
    assert check_topology(definitions) == []
    assert ordered_startup(definitions) == ["a", "b", "c"]


def test_duplicate_names():
    problems = check_topology([_svc("a"), _svc("a")])
    assert problems == ["service name a used 2 times"]


def test_port_collision():
    problems = check_topology([_svc("a", ["7054:7054"]), _svc("b", ["7054:7054"])])
    assert problems == ["host port 7054 published by both a and b"]


def test_unknown_dependency():
    problems = check_topology([_svc("a", depends_on=["ghost"])])
    assert problems == ["a: depends on unknown service ghost"]


def test_cycle():
    problems = check_topology([_svc("a", depends_on=["b"]), _svc("b", depends_on=["a"])])
    assert len(problems) == 1
    assert "Circular dependency" in problems[0]


def test_dependencies_start_first():
    definitions = [_svc("connector", depends_on=["peer"]), _svc("peer", depends_on=["orderer"]), _svc("orderer")]
    assert ordered_startup(definitions) == ["orderer", "peer", "connector"]


def test_bare_container_ports_do_not_collide():
    assert check_topology([_svc("a", ["3000"]), _svc("b", ["3000"])]) == []


def test_ip_bound_port_collision():
    problems = check_topology([_svc("a", ["127.0.0.1:8080:80"]), _svc("b", ["8080:8080"])])
    assert problems == ["host port 8080 published by both a and b"]
