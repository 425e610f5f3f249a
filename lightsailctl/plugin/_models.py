from typing import Any

from lightsailctl.core import DataModel, DataModelField


class OperationConfig(DataModel):
    """Operation config sent by AWS CLI.

    Args:
        debug:
            A value indicating whether extra diagnostics are logged.
        endpoint:
            Lightsail API endpoint override.
        region:
            AWS region.
        profile:
            AWS profile name.
        ca_bundle:
            Path to a CA bundle for TLS verification.
        do_not_verify_ssl:
            A value indicating whether TLS verification is disabled.
        cli_version:
            Version of the calling CLI, for diagnostics.
    """

    debug: bool = False
    endpoint: str = ""
    region: str = ""
    profile: str = ""
    ca_bundle: str = DataModelField(alias="caBundle", default="")
    do_not_verify_ssl: bool = DataModelField(
        alias="doNotVerifySSL", default=False
    )
    cli_version: str = DataModelField(alias="cliVersion", default="")


class PluginInput(DataModel):
    input_version: str = DataModelField(alias="inputVersion", default="")
    operation: str = ""
    payload: Any = None
    configuration: OperationConfig = OperationConfig()


class PushContainerImagePayload(DataModel):
    service: str = ""
    image: str = ""
    label: str = ""
