# clustercache

Building blocks for the in-memory cluster cache of a resource scheduler:
multi-dimensional resource arithmetic, users and access control lists, the
YAML scheduler configuration, the messages exchanged with resource managers,
nodes with the allocations running on them, and a set of counters.

## Installation

```
pip install .
```

To run the test suite, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Resources

`clustercache.resources.Resource` holds named integer quantities such as
`memory` and `vcore`. The module-level functions never change their
arguments:

```python
from clustercache import resources
from clustercache.resources import Resource, resource_from_conf

total = resource_from_conf({"memory": "1000", "vcore": 10})
used = Resource({"memory": 200})

resources.add(total, used)     # new Resource, sum of both
resources.sub(used, total)     # new Resource, values may go negative
resources.fit_in(total, used)  # True: every quantity of used fits in total
resources.is_zero(None)        # True: a missing resource counts as zero
resources.equals(Resource({"memory": 0}), Resource())  # True
str(total)                     # "map[memory:1000 vcore:10]"
```

`Resource.copy()` returns an independent copy and `Resource.add_to(other)`
adds in place. `resource_from_conf` raises `ResourceError` for a quantity
that is not an integer.

## Users and ACLs

`clustercache.security.parse_acl` reads an ACL of the form
`"user1,user2 group1,group2"`. An empty string allows nobody, `*` allows
every user (or every group in the group part), a leading space gives a
group-only list, and more than one separating space raises `SecurityError`.

```python
from clustercache.security import UserGroup, UserGroupCache, parse_acl

acl = parse_acl("alice dev,ops")
acl.check_access(UserGroup("bob", ("ops",)))  # True

cache = UserGroupCache(resolver=lambda user: ["staff"])
cache.convert_ugi(ugi)  # any object with .user and .groups
```

`UserGroupCache.convert_ugi` uses the groups that come with the request.
When there are none, it asks the resolver and caches the answer. Without a
resolver a user has no groups. An empty user, or a resolver that raises
`LookupError` or `OSError`, gives `SecurityError`.

## Configuration

Partitions and queues come from a YAML scheduler configuration:

```yaml
partitions:
  - name: default
    preemption:
      enabled: true
    queues:
      - name: root
        properties:
          x: 123
        queues:
          - name: production
            submitacl: "alice dev"
          - name: test
            resources:
              guaranteed: {memory: 50, vcore: 1}
              max: {memory: 100, vcore: 1}
```

`clustercache.configs.parse_config` turns such a document into a
`SchedulerConfig` of `PartitionConfig`, `QueueConfig` and `PlacementRule`
objects. If the top-level queues of a partition are not a single `root`,
they are placed under a new `root` parent queue. The following raise
`ConfigError`:

- a document that is not valid YAML;
- a configuration without partitions;
- duplicate partition or queue names;
- a queue name that is not 1 to 64 characters of letters, digits, `-` or `_`;
- a quantity that is not an integer;
- an ACL that cannot be parsed.

Configurations can be kept per policy group:

```python
from clustercache import configs

configs.set_config_data(yaml_text)
conf = configs.load_scheduler_config("default-policy-group")
configs.store_config("default-policy-group", conf)
configs.get_config("default-policy-group")
```

Without data from `set_config_data`, `load_scheduler_config` reads
`<policy_group>.yaml` from the working directory.

Partition names are qualified with the resource manager id:

```python
configs.normalized_partition_name("default", "rm-1")       # "[rm-1]default"
configs.rm_id_from_partition_name("[rm-1]default")          # "rm-1"
configs.partition_name_without_cluster_id("[rm-1]default")  # "default"
```

## Messages, allocations and nodes

`clustercache.protocol` defines these messages as dataclasses:

- `Allocation`;
- `UserGroupInformation`;
- `NewNodeInfo`;
- `AllocationProposal`;
- `ReleaseAllocation`;
- the `TerminationType` enum.

`clustercache.allocation.new_allocation_info(uuid, proposal)` turns a
proposal into an `AllocationInfo`, stripping the resource manager id from
the partition name. `create_mock_allocation_info` builds a minimal one.

`clustercache.node.NodeInfo` tracks a node's allocations together with its
`allocated_resource` and `available_resource`. It also reads `hostname`,
`rackname` and `partition` from the attributes `si.io/hostname`,
`si.io/rackname` and `si.io/node-partition`.

```python
from clustercache.node import NodeInfo, node_info_from_proto

node = NodeInfo("node-1", total, {"si.io/hostname": "host1"})
node.add_allocation(info)
node.available_resource          # total minus allocated
node.remove_allocation(info.uuid)  # returns the allocation, or None
```

`node_info_from_proto` creates a node from a `NewNodeInfo` message.

## Metrics

`clustercache.metrics.SchedulerMetrics` holds thread-safe named counters.
`increment` and `decrement` return the new value, and `value` reads a
counter, which is zero if it was never touched. Names for the usual
counters are module constants, such as `ACTIVE_NODES` and
`SCHEDULED_ALLOCATION_SUCCESSES`. An empty name or a negative amount raises
`ValueError`, and an amount that is not an integer raises `TypeError`.

## What this package does not do

The package has no partition objects and no queue hierarchy built from a
configuration. It does not register applications or track their state, and
it does not enforce queue limits or check queue access. It offers no
command-line tool, no server and no persistent storage: everything lives in
memory, in the objects described above.