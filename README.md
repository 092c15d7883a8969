# mcserverctl

A Python library for running and looking after a Minecraft server.

It takes care of:

- starting, stopping and restarting the server's Java process, and sending
  console commands to it;
- reading and updating `server.properties`, and writing a default one;
- accepting the EULA and checking whether it has been accepted;
- installing default configuration templates (`server.properties`,
  `spigot.yml`, `bukkit.yml`) and filling in `{{ placeholder }}` values;
- installing Forge or Fabric and unpacking modpack archives;
- sampling CPU and memory use of the server process, keeping an hour of
  history and raising alerts when thresholds are crossed.

The only runtime dependency is `psutil`, which is used for process metrics.

## Getting started

```python
from mcserverctl.app_state import AppState
from mcserverctl.process_manager import ProcessManager
from mcserverctl.api import ServerApi

state = AppState("/srv/minecraft", "java", "server.jar")
manager = ProcessManager(state, stop_timeout=30)
api = ServerApi(state, manager)

api.accept_eula()
api.update_server_properties([("max-players", "10"), ("difficulty", "hard")])

response = api.start_server()
print(response.to_dict())             # {'success': True, 'data': None, 'error': None}

print(api.get_server_status().data)   # "starting", then "running"
api.execute_command("/say hello")
api.stop_server()
```

`AppState` takes the server directory, the Java executable to run and the
name of the server JAR inside that directory. The server is launched as
`java -Xmx2G -jar server.jar` (the arguments come from `state.server_args`)
with the server directory as its working directory.

The status moves from `stopped` to `starting` when the process is launched,
to `running` when a line containing `Done` appears on its output, and back
to `stopped` when its output closes. `stop_server()` writes `stop` to the
console and kills the process if it has not exited after `stop_timeout`
seconds.

Every `ServerApi` method returns an `ApiResponse` with `success`, `data` and
`error`; failures (an `AppError` or an `OSError`) are reported in `error`
instead of being raised. `get_server_properties()` returns a `ServerConfig`
holding the current properties and JVM arguments.

## Commands

`CommandExecutor(manager, restart_delay=2.0).execute(command)` understands:

- `start`, `stop` and `restart` (stop, wait `restart_delay` seconds, start);
- `/anything`, which sends `anything` to the server console;
- any other text, which is sent to the console as it is.

Console commands raise `ServerError` unless the server is running.
`ServerApi.restart_server()` and `ServerApi.execute_command()` go through the
same executor.

## Working with files directly

The configuration helpers take the server directory as their first argument:

```python
from mcserverctl.server_properties import read_properties, create_default_properties
from mcserverctl.eula import is_eula_accepted
from mcserverctl.templates import install_default_templates, apply_template

create_default_properties("/srv/minecraft")
print(read_properties("/srv/minecraft")["server-port"])   # "25565"
print(is_eula_accepted("/srv/minecraft"))

install_default_templates("/srv/minecraft")
apply_template(
    "/srv/minecraft",
    "spigot.yml.tmpl",
    {"minecraft_version": "1.20.4", "view_distance": "10"},
    "/srv/minecraft/spigot.yml",
)
```

`write_properties` writes keys in sorted order under a comment header with a
timestamp. `install_default_templates` only writes templates that are not
already present in `templates/`; `apply_template` raises `ConfigError` when
the named template does not exist.

## Modpacks

```python
from mcserverctl.models import ModpackConfig
from mcserverctl.modpack_installer import ModpackInstaller, extract_zip

installer = ModpackInstaller(state)
installer.forge_url_template = "https://downloads.example.com/forge/{version}-installer.jar"
installer.install_modpack(
    ModpackConfig(
        name="My pack",
        version="1.0",
        forge_version="1.20.1-47.2.0",
        installer_url="https://downloads.example.com/packs/my-pack.zip",
    )
)
```

The installer downloads and runs the Forge installer (or, for
`fabric_version`, the Fabric installer from `fabric_installer_url`), then
downloads `installer_url`: a `.zip` is unpacked into the server directory, a
`.jar` is run with Java. Both loader locations must be set before a loader
is installed, otherwise `ConfigError` is raised; failed downloads and failed
installers raise `ProcessError`. `extract_zip` can also be used on its own and
skips archive entries that would land outside the target directory. After a
loader is installed, point `state.server_jar` at the loader's server JAR
yourself.

## Events

`AppState` keeps the current `ServerStatus` and latest `MetricsData`, and
passes events to subscribers as `(kind, payload)`:

```python
unsubscribe = state.subscribe(lambda kind, payload: print(kind, payload))
```

The kinds are `"log"` (a `LogEntry` for each server output line and installer
message), `"status_changed"` (a `ServerStatus`), `"metrics_updated"` (a
`MetricsData`) and `"alert"` (a `LogEntry`). A listener that raises is logged
and skipped.

## Monitoring and alerts

```python
from mcserverctl.resource_monitor import ResourceMonitor
from mcserverctl.alerts import AlertManager, AlertThresholds
from mcserverctl.metrics_collector import MetricsCollector

monitor = ResourceMonitor(state, interval=1.0)
monitor.start()            # samples in a background thread while the server runs

alerts = AlertManager(state)
alerts.set_thresholds(AlertThresholds(cpu_threshold=90.0, memory_threshold=85.0, player_threshold=18))

collector = MetricsCollector(state)

metrics = monitor.sample()  # None unless the server is running
if metrics is not None:
    collector.add_metrics(metrics)
    print(alerts.check_alerts(metrics))          # list of alert messages sent
    print(collector.get_average_metrics(60))     # CPU/memory averaged over the last minute

monitor.stop()
```

`ResourceMonitor` finds the Java process whose command line contains the
server JAR name and records its CPU use, resident memory, total system
memory and uptime. Player count and TPS are not measured.

`AlertManager` raises an alert of each kind (CPU, memory, players) at most
once every 300 seconds of metric time; the memory alert is skipped when the
total memory is unknown.

`MetricsCollector` keeps the last 3600 samples and, at most every five
minutes, writes them as JSON to `logs/metrics_YYYYMMDD.json` in the server
directory. The `logs` directory is not created for you, and write errors are
ignored.

## Errors

All errors derive from `mcserverctl.errors.AppError`: `ServerError` (for
example, starting a server that is already running or sending a command to
one that is not), `ServerJarNotFoundError`, `ConfigError`, `ProcessError`,
`WebSocketError` and `JavaNotFoundError`.

## What it does not do

- There is no command-line program or desktop window; this is a library.
- No network server is provided: events reach only in-process subscribers.
- Java is not located automatically; pass the path of the Java executable to
  `AppState`.