from event_envelope.environment import LambdaEnvironment, StaticEnvironmentFacts, load_environment_facts

LAMBDA_VARIABLES = (
    "AWS_EXECUTION_ENV",
    "AWS_LAMBDA_FUNCTION_NAME",
    "AWS_LAMBDA_FUNCTION_MEMORY_SIZE",
    "AWS_LAMBDA_FUNCTION_VERSION",
    "AWS_REGION",
)


def test_lambda_environment_reads_runtime_variables(monkeypatch) -> None:
    monkeypatch.setenv("AWS_EXECUTION_ENV", "AWS_Lambda_python3.12")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "orders-handler")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_MEMORY_SIZE", "512")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_VERSION", "7")
    monkeypatch.setenv("AWS_REGION", "eu-north-1")

    facts = load_environment_facts()

    assert facts.runtime == "AWS_Lambda_python3.12"
    assert facts.function_name == "orders-handler"
    assert facts.function_memory_size == "512"
    assert facts.function_version == "7"
    assert facts.region == "eu-north-1"


def test_lambda_environment_defaults_to_empty_strings(monkeypatch) -> None:
    for name in LAMBDA_VARIABLES:
        monkeypatch.delenv(name, raising=False)

    facts = LambdaEnvironment()

    assert facts.runtime == ""
    assert facts.function_name == ""
    assert facts.function_memory_size == ""
    assert facts.function_version == ""
    assert facts.region == ""


def test_static_environment_facts_default_to_empty_strings() -> None:
    facts = StaticEnvironmentFacts(region="us-east-1")

    assert facts.region == "us-east-1"
    assert facts.runtime == ""
