# ecsnetsim

Building blocks for modelling stream-processing applications that are spread
over edge devices and cloud nodes: reading where each streaming task is
placed, working out how the tasks and each node's supervisor are wired
together, and modelling the CPU cores, sources, operators and run control
that move messages through the pipeline.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Command line

```
ecsnetsim PLAN TOPOLOGY [--plan-format {auto,xml,text}] [--ackers] [--node NODE ...] [--json]
```

`ecsnetsim` reads an allocation plan and a dataflow topology and prints the
placed tasks, the upstream categories of each task, every connection between
gates, and the nodes that receive each sender category's output.

- `--plan-format` – `xml`, `text`, or `auto` (the default: a plan whose first
  non-blank character is `<` is read as XML).
- `--ackers` – also connect every task's `ackerOut` gate to its supervisor.
- `--node NODE` – a node present in the network, such as `pi[0]`; may be
  repeated. Tasks on other nodes are left out. Without it every node in the
  plan is taken as present.
- `--json` – print the result as JSON instead of plain lines.

A malformed plan or topology, or a file that cannot be read, prints
`error: ...` to standard error and exits with status 1.

## Input files

### Dataflow topology

A plain text file, one edge per line, with three whitespace-separated fields:
the sending task category, the receiving task category, and a flag. A pair
counts as connected when the flag starts with `1`. Empty lines and lines
starting with `#` are skipped; any other line without exactly three fields
raises `TopologyError`.

```
# src      dest      connected
source     filter    1
filter     sink      1
```

Read it with `ecsnetsim.topology.parse_topology(text)` or
`ecsnetsim.topology.read_topology(path)`; `DspTopology.senders_of(category)`
and `DspTopology.is_connected(src, dest)` answer questions about it.

### Task allocation plan (text)

One task per line, seven whitespace-separated fields:

```
node  task-name  task-type  category  cycles-per-event  value-1  value-2
```

For the type `ecsnetpp.stask.StreamingSource` the two values are the message
size and the event rate; for `ecsnetpp.stask.StreamingOperator` they are the
selectivity and productivity ratios. A line with another number of fields
raises `TopologyError`. Parse it with
`ecsnetsim.taskplan.parse_task_plan(text, known_nodes)` or
`read_task_plan(path, known_nodes)`, which return `PlannedTask` objects, then
turn them into placements with `ecsnetsim.taskplan.to_placements(tasks)`.

### Device allocation plan (XML)

A `<devices>` document listing each `<device>` by `<name>` and
`<index-range>` (for example `0..3`, or a single index), with its `<tasks>`.
Each `<task>` has a `<name>`, `<category>` and `<type>`, an optional
`<processingdelay>` given either in `<cpucycles>` or as `<measuredtime>`, and,
for sources and operators, either a fixed value (`<msgsize>`, `<eventrate>`,
`<selectivity>`, `<productivity>`) or a named distribution
(`<msgsizedistribution>`, `<sourceevdistribution>`,
`<selectivitydistribution>`, `<productivitydistribution>`) with a `<name>`,
`<type>` and optional numeric `<values>`. Every index in the range yields one
`DeviceTask` named after the task plus its index, on node `name[index]`.

Parse it with `ecsnetsim.xmlplan.parse_allocation_plan(text, node_exists)` or
`read_allocation_plan(path, node_exists)`; problems raise
`AllocationPlanError`. `ecsnetsim.xmlplan.to_placements` converts the tasks
into placements.

## Wiring

`ecsnetsim.topology.build_wiring(placements, topology, ackers_enabled)`
connects tasks on the same node directly where their categories are
connected, routes every remaining input and output through the node's
supervisor, and returns a `Wiring` holding each `Connection`, the upstream
categories of every task, and the downstream nodes of every sender category.

## Models

- `ecsnetsim.cpu.CpuCore` – computes per-message processing delay from CPU
  cycles or measured time, queues `StreamingMessage`s per sender, and reports
  `CpuState` changes through a callback.
- `ecsnetsim.scheduling.RoundRobinCpuCoreScheduler` – hands out core indices
  in turn.
- `ecsnetsim.msgsize.FixedMessageSizeDistribution`,
  `ecsnetsim.selectivity.FixedSelectivityDistribution`,
  `ecsnetsim.productivity.FixedProductivityDistribution` – fixed message
  size, selectivity and productivity models.
- `ecsnetsim.controller.SimulationController` – counts generated and received
  packets after the warm-up period and decides when to stop.
- `ecsnetsim.supervisor.GlobalStreamingSupervisor` – maps sender categories to
  downstream nodes, resolves their addresses with a resolver you supply, and
  fans messages out through a transport you supply.

```python
from ecsnetsim.scheduling import RoundRobinCpuCoreScheduler
from ecsnetsim.selectivity import FixedSelectivityDistribution

scheduler = RoundRobinCpuCoreScheduler(4)
print([scheduler.next_core_index() for _ in range(4)])   # [1, 2, 3, 0]

selectivity = FixedSelectivityDistribution(0.25)
print(selectivity.selectivity_window_length())            # 4.0
```

## What it does not do

- It has no event scheduler or network model: nothing here runs a simulation
  over time. `CpuCore`, `SimulationController` and
  `GlobalStreamingSupervisor` are driven by the caller, who passes in the
  current time, address resolution and message delivery.
- It offers no models for the rate at which sources produce events; a task
  plan's event rate is carried through as a parameter only.
- The command reports wiring; it does not create tasks or run them.