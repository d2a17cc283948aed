# rm_common

Building blocks for controlling competition robots. The package does no
messaging of its own. Publishing, service calls and clocks are passed in as
plain callables and numbers, so every part can run in tests or inside a
simulation loop.

## Contents

- `rm_common.math_utilities`: `angular_minus` (shortest signed angle
  difference), `min_abs`, `sgn`, `square`, and `alpha` (the smoothing factor
  of a first-order low-pass filter).
- `rm_common.params`: reads parameters out of dictionaries. It has `get_param`
  and `as_float`, `float_field` and `float_member`. The last three raise
  `TypeError` for values that are not numbers.
- `rm_common.linear_interpolation.LinearInterp`: a piecewise-linear lookup
  built from `(x, y)` points, held at the end values outside their range.
  Points that are not sorted by `x` raise `ValueError`.
- `rm_common.traj_gen`: `RampTraj` gives a ramp trajectory with `pos`, `vel`
  and `acc` at any time. `calc` returns `False` when the acceleration limit is
  too small. `MinTimeTraj` is a bang-bang minimum-time controller whose `tau`
  gives the torque to apply.
- `rm_common.one_euro_filter.OneEuroFilter`: the adaptive 1€ low-pass filter.
- `rm_common.lqr`: `Lqr` with `compute_k()` and the `k` property, and
  `solve_riccati_arimoto_potter`, which solves the continuous algebraic
  Riccati equation. Matrices that do not fit together, or a `Q` or `R` that is
  not symmetric or not (semi-)definite, raise `ValueError`.
- `rm_common.kalman_filter.KalmanFilter`: a linear Kalman filter with `clear`,
  `predict`, `update` and the `state` property. `predict` and `update` raise
  `RuntimeError` until `clear` has been called.
- `rm_common.handles`: dataclass handles `ActuatorExtraHandle`,
  `GpioStateHandle`, `GpioCommandHandle` and `TofRadarHandle`, the `GpioType`
  enum, and a `HandleRegistry` that looks handles up by name. Missing handles
  and unset fields raise `HardwareInterfaceError`.
- `rm_common.messages`: dataclasses for referee data (`GameRobotStatus`,
  `PowerHeatData`, `CapacityData`) and for commands (`ChassisCmd`,
  `GimbalCmd`, `ShootCmd`, `MultiDofCmd`, `Twist`, `Vector3`). It also holds
  the `ShootMode`, `SpeedLimit` and `RobotId` enums.
- `rm_common.heat_limit.HeatLimit`: picks the shooting frequency and the
  muzzle speed class from barrel heat. Modes are set with `ShootHz`.
- `rm_common.power_limit.PowerLimit`: picks the chassis power limit from
  referee and super-capacitor data. `PowerMode` lists the capacitor states. A
  capacitor sample counts as online if it is less than 0.3 s older than the
  `now` passed to `set_capacity_data`.
- `rm_common.service_caller`: `ServiceCaller` runs a client callable in a
  background thread, one call at a time. The subclasses are
  `SwitchControllersCaller`, `QueryCalibrationCaller` and
  `SwitchDetectionCaller`, and the module holds their request and response
  dataclasses. A client that returns `None` or raises counts as a failed call.
- `rm_common.controller_manager.ControllerManager`: loads the configured
  state, main and calibration controllers. It buffers start and stop
  requests, never holding one controller in both buffers, and sends them in
  `update()`.
- `rm_common.calibration_queue`: `CalibrationService` and `CalibrationQueue`
  switch calibration controllers in one step after another. The queue polls
  the calibration services every 0.2 s until each step reports calibrated.
- `rm_common.command_sender`: `Vel2DCommandSender`, `ChassisCommandSender`,
  `GimbalCommandSender`, `ShooterCommandSender`, `BalanceCommandSender` and
  `Vel3DCommandSender`, all built on `CommandSender`. Each takes a parameter
  dictionary and a `publish` callable. Missing required parameters raise
  `KeyError`.
- `rm_common.joint_senders`: `JointPositionBinaryCommandSender`,
  `CardCommandSender`, `JointJogCommandSender`, `JointPointCommandSender`,
  `CameraSwitchCommandSender` and `MultiDofCommandSender`. It also has
  `DoubleBarrelCommandSender`, which switches between two shooters when one
  runs short of heat.
- `rm_common.tof_radar_controller.TofRadarController`: publishes a
  `TofRadarData` for every radar in a `HandleRegistry` on the topic
  `<name>/data`. It converts the distance from centimetres to metres.

## Installation

```
pip install .
```

## Examples

Generate a ramp trajectory:

```python
from rm_common.traj_gen import RampTraj

traj = RampTraj()
traj.set_limit(1.0)
traj.set_state(0.0, 1.0, 0.0)
if traj.calc(2.5):
    print(traj.pos(1.0), traj.vel(1.0), traj.acc(1.0))
```

Compute an LQR gain:

```python
import numpy as np
from rm_common.lqr import Lqr

lqr = Lqr(np.array([[0.0, 1.0], [0.0, 0.0]]), np.array([[0.0], [1.0]]),
          np.eye(2), np.eye(1))
lqr.compute_k()
print(lqr.k)
```

Smooth a noisy signal:

```python
from rm_common.one_euro_filter import OneEuroFilter

f = OneEuroFilter(120.0, 2.543785, 0.000001, 1.0)
for sample in (0.0, 0.1, 0.05, 0.2):
    f.input(sample)
print(f.output())
```

Send a gimbal command:

```python
from rm_common.command_sender import GimbalCommandSender

sent = []
gimbal = GimbalCommandSender(
    {"topic": "gimbal/command", "max_yaw_vel": 3.0, "max_pitch_vel": 2.0, "track_timeout": 0.5},
    sent.append,
)
gimbal.set_rate(0.5, -2.0)  # the pitch scale is clamped to -1
gimbal.send_command(1.0)
print(sent[-1].rate_yaw, sent[-1].rate_pitch, sent[-1].stamp)
```

## What the package does not do

- It carries no messages itself. It has no publishers, subscribers or service
  clients of its own. You supply the callables that deliver messages and
  answer requests.
- It does not read parameters from a parameter server. Configuration is passed
  in as dictionaries.
- It does not talk to hardware. Handles only hold the values you put in them.
- It has no coordinate-transform tracking or broadcasting, no IMU orientation
  filters, and no command-line program.

## Tests

```
pip install .[test]
pytest
```