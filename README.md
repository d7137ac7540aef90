# fargate_cli

A library of building blocks for deploying and operating containers on AWS
Fargate: certificate handling, choosing what to deploy from a docker-compose
file, environment variables and secrets, reading and following CloudWatch
logs, pointing scheduled-event rules at a task definition revision, and
console output.

Install it with its test extra to run the tests:

```
pip install .[test]
pytest
```

## Talking to AWS

The package does not create AWS clients itself. `acm.SDKClient`,
`cloudwatchlogs.CloudWatchLogs` and `events.CloudWatchEvents` each take a
client object that offers the matching boto3-style calls (keyword arguments
in, response dictionaries out, exceptions on failure, `get_paginator` for
paged listings). Hand them a real SDK client or a stand-in during tests.

## Modules

- `fargate_cli.acm` – `Certificate`, `CertificateValidation`,
  `CertificateResourceRecord` and `Certificates` (a list with
  `get_certificates(domain_name)`). `SDKClient` requests, imports, deletes,
  lists and fills in (`inflate_certificate`) certificates and maps ARNs to
  domain names. `validate_alias` and `validate_domain_name` raise
  `ValueError` for names of bad length or with too few or too many octets.
- `fargate_cli.ports` – `Port` plus `inflate_port`, `inflate_ports`,
  `build_port` and `validate_port`. `80` becomes `HTTP:80`, `443` becomes
  `HTTPS:443`, `tcp:3386` becomes `TCP:3386`, and a bare number is TCP.
- `fargate_cli.output` – `ConsoleOutput` writes plain, coloured or emoji
  messages with `debug` (only when verbose), `info`, `warn`, `say`,
  `key_value`, `line_break` and tab-aligned `table`. `fatal`/`fatals` print a
  warning and the errors, then raise `SystemExit(1)` unless `test` is set.
- `fargate_cli.settings` – `load_settings(flags, environ, config_path)`
  resolves cluster, service, task, rule, verbose and nocolor from flags first,
  then `FARGATE_*` environment variables, then `fargate.yaml`/`fargate.yml`.
  `Settings.cluster_name()` and friends raise `ConfigurationError` when empty.
  `validate_region`, `resolve_region` (argument, `AWS_DEFAULT_REGION`,
  `AWS_REGION`, then `us-east-1`) and `validate_cpu_and_memory` check the rest.
- `fargate_cli.envvars` – `EnvVar`, `Secret`, `extract_env_vars` for
  `KEY=value` strings, `read_var_file`, `process_env_var_args`,
  `process_secret_var_args`, and the `ServiceEnvSetOperation` /
  `ServiceEnvUnsetOperation` checks. Bad input raises `InvalidEnvVarError`.
- `fargate_cli.cloudwatchlogs` – `CloudWatchLogs.create_log_group` (an
  existing group is not an error) and `get_logs`, returning `LogLine`
  objects; failures raise `ServiceError`.
- `fargate_cli.logs` – `GetLogsOperation` keeps stream colours and remembers
  the last 10,000 event IDs. `get_logs(operation, logs_client, emit)` fetches
  once and passes each new event to `emit(stream, message, colour, time,
  no_prefix)`; `follow_logs` polls every second with a ten-second overlap.
  `parse_time` accepts durations (`-1h10m30s`) or timestamps
  (`2017-12-22 15:10:03 EST`; no zone means UTC).
- `fargate_cli.events` – `CloudWatchEvents.update_target_revision(rule, arn)`
  points a rule's first target at a task definition; `EventsTargetOperation`
  requires a revision. Failures raise `EventsError`.
- `fargate_cli.deploy` – `load_compose` parses docker-compose YAML;
  `get_docker_service_to_deploy` picks the only service, or the one labelled
  `aws.ecs.fargate.deploy: 1`; `convert_env_vars`, `convert_secrets`,
  `validate_flags`, `parse_scale_expression` (`5`, `+5`, `-2`) and
  `resolve_cpu_and_memory`. Problems raise `DeployError`.
- `fargate_cli.textutil` – `humanize`, `titleize`, `map_strings` and
  `ask_for_confirmation`.

## Examples

```python
from fargate_cli.ports import inflate_port
from fargate_cli.textutil import humanize, titleize
from fargate_cli.settings import validate_cpu_and_memory
from fargate_cli.deploy import parse_scale_expression

print(inflate_port("443"))              # HTTPS:443
print(humanize("HELLO_COMPUTER"))       # hello computer
print(titleize("HELLO_COMPUTER"))       # Hello Computer
print(parse_scale_expression("+2", 3))  # 5

validate_cpu_and_memory("256", "512")   # accepted
validate_cpu_and_memory("1024", "1024") # raises InvalidCpuAndMemoryCombination
```

Valid CPU and memory combinations:

| CPU (units) | Memory (MiB)                          |
| ----------- | ------------------------------------- |
| 256         | 512, 1024, or 2048                    |
| 512         | 1024 through 4096 in 1GiB increments  |
| 1024        | 2048 through 8192 in 1GiB increments  |
| 2048        | 4096 through 16384 in 1GiB increments |
| 4096        | 8192 through 30720 in 1GiB increments |

## What it does not do

- There is no command-line program; the package is a library only.
- It has no ECS, EC2, load balancer, Route 53 or STS operations: it does not
  register task definitions, update or restart services, set desired counts,
  list services or tasks, or look up account IDs. `deploy` only decides what
  to deploy and validates it.
- It does not create AWS sessions or credentials; you supply the clients.