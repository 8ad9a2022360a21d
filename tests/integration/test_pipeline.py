"""Integration tests for the end-to-end deployment pipeline."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
import responses

from election_deployer import JsonRpcChainClient, PipelineStatus, run_pipeline
from election_deployer.exceptions import (
    ChainClientError,
    ConfigError,
    DeploymentError,
    InvalidNetworkNameError,
    RecordWriteError,
    UnresolvedDependencyError,
)
from election_deployer.paths import get_record_path
from election_deployer.persistence import load_deployment_record
from election_deployer.plan import contract, ref
from election_deployer.types import ContractSpec

RPC_URL = "http://127.0.0.1:8545"
NODE_ACCOUNT = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"


class TestLocalNetworks:
    """Networks that need no credentials."""

    def test_skips_validation_and_balance(self, client_factory, deployments_root: Path):
        """Test that environment and balance are never consulted locally."""
        client = client_factory(balance=Decimal("0"))
        env = {"PRIVATE_KEY": "your_owner_private_key_here", "ALCHEMY_API_KEY": None}

        result = run_pipeline("localhost", env, client, deployments_root=deployments_root)

        assert result.status is PipelineStatus.SUCCESS
        assert result.warnings == []
        assert not client.called("get_balance")
        assert len(client.deploy_calls) == 3

    def test_unknown_network_treated_as_local(self, fake_client, empty_env, deployments_root: Path):
        """Test that an unknown network proceeds without credentials."""
        result = run_pipeline("devnet", empty_env, fake_client, deployments_root=deployments_root)

        assert result.ok
        assert get_record_path("devnet", deployments_root).exists()


class TestCredentialedNetworks:
    """Networks that require credentials."""

    def test_missing_credential_halts_before_chain(self, fake_client, credentials_env, deployments_root: Path):
        """Test that a missing key stops the run with zero chain interactions."""
        credentials_env["PRIVATE_KEY"] = None

        result = run_pipeline("sepolia", credentials_env, fake_client, deployments_root=deployments_root)

        assert result.status is PipelineStatus.CONFIG_ERROR
        assert isinstance(result.error, ConfigError)
        assert result.error.missing_key == "PRIVATE_KEY"
        assert result.exit_code != 0
        assert fake_client.calls == []
        assert not get_record_path("sepolia", deployments_root).exists()

    def test_placeholder_api_key_halts(self, fake_client, credentials_env, deployments_root: Path):
        """Test that a placeholder API key stops the run."""
        credentials_env["ALCHEMY_API_KEY"] = "your_alchemy_api_key_here"

        result = run_pipeline("goerli", credentials_env, fake_client, deployments_root=deployments_root)

        assert result.status is PipelineStatus.CONFIG_ERROR
        assert result.error.missing_key == "ALCHEMY_API_KEY"
        assert fake_client.deploy_calls == []

    def test_low_balance_only_warns(self, client_factory, credentials_env, deployments_root: Path):
        """Test that a low balance still lets the sequencer run."""
        client = client_factory(balance=Decimal("0.0001"))

        result = run_pipeline("sepolia", credentials_env, client, deployments_root=deployments_root)

        assert result.ok
        assert len(result.warnings) == 1
        assert result.warnings[0].faucet_hint == "https://sepoliafaucet.com/"
        assert len(client.deploy_calls) == 3

    def test_balance_checked_before_deployment(self, fake_client, credentials_env, deployments_root: Path):
        """Test the order of chain interactions."""
        run_pipeline("sepolia", credentials_env, fake_client, deployments_root=deployments_root)

        methods = [call[0] for call in fake_client.calls]
        assert methods[:3] == ["resolve_signers", "get_balance", "deploy_contract"]


class TestSequencing:
    """Deployment order and argument resolution."""

    @pytest.mark.parametrize("order", [("A", "B"), ("B", "A")])
    def test_dependent_receives_dependency_addresses(self, client_factory, empty_env, deployments_root, order):
        """Test that C gets exactly the addresses of A and B, whatever their order."""
        client = client_factory()
        specs = [contract(order[0]), contract(order[1]), contract("C", ref("A"), ref("B"))]

        result = run_pipeline("localhost", empty_env, client, specs=specs, deployments_root=deployments_root)

        assert result.ok
        assert client.args_for("C") == [client.confirmed["A"], client.confirmed["B"]]
        assert list(result.record.contracts) == [order[0], order[1], "C"]

    def test_invalid_plan_is_plan_error(self, fake_client, empty_env, deployments_root: Path):
        """Test that a plan defect is reported before any chain interaction."""
        specs = [contract("C", ref("A")), contract("A")]

        result = run_pipeline("localhost", empty_env, fake_client, specs=specs, deployments_root=deployments_root)

        assert result.status is PipelineStatus.PLAN_ERROR
        assert isinstance(result.error, UnresolvedDependencyError)
        assert fake_client.calls == []

    def test_undeclared_reference_is_plan_error(self, fake_client, empty_env, deployments_root: Path):
        """Test that a ref outside depends_on is rejected."""
        specs = [contract("A"), ContractSpec(name="B", constructor_args=(ref("A"),))]

        result = run_pipeline("localhost", empty_env, fake_client, specs=specs, deployments_root=deployments_root)

        assert result.status is PipelineStatus.PLAN_ERROR
        assert fake_client.calls == []


class TestFailureHandling:
    """Failed deployments."""

    def test_failure_writes_no_record(self, client_factory, empty_env, deployments_root: Path):
        """Test that a failed step leaves no record behind."""
        client = client_factory(fail_on=["VoterRegistry"])

        result = run_pipeline("localhost", empty_env, client, deployments_root=deployments_root)

        assert result.status is PipelineStatus.DEPLOYMENT_ERROR
        assert isinstance(result.error, DeploymentError)
        assert result.error.contract_name == "VoterRegistry"
        assert result.exit_code == 1
        assert result.record is None
        assert [c.name for c in result.deployed] == ["VotingToken"]
        assert not get_record_path("localhost", deployments_root).exists()

    def test_failure_keeps_prior_record(self, client_factory, empty_env, deployments_root: Path):
        """Test that an earlier successful record survives a failed run unchanged."""
        first = run_pipeline("localhost", empty_env, client_factory(), deployments_root=deployments_root)
        record_path = get_record_path("localhost", deployments_root)
        before = record_path.read_text()

        failing = client_factory(fail_on=["VoterRegistry"], address_offset=0x9000)
        result = run_pipeline("localhost", empty_env, failing, deployments_root=deployments_root)

        assert first.ok
        assert not result.ok
        assert record_path.read_text() == before


class TestRecordPersistence:
    """Deployment record written on success."""

    def test_record_contents(self, fake_client, empty_env, deployments_root: Path, fixed_clock):
        """Test the persisted record shape."""
        result = run_pipeline(
            "localhost", empty_env, fake_client, deployments_root=deployments_root, clock=fixed_clock
        )

        with open(result.record_path) as f:
            data = json.load(f)

        assert data == {
            "network": "localhost",
            "deployer": fake_client.deployer,
            "contracts": {
                "VotingToken": fake_client.confirmed["VotingToken"],
                "VoterRegistry": fake_client.confirmed["VoterRegistry"],
                "ElectionFactory": fake_client.confirmed["ElectionFactory"],
            },
            "timestamp": "2024-03-01T12:30:00.000Z",
        }

    def test_second_run_overwrites_first(self, client_factory, empty_env, deployments_root: Path):
        """Test that the record reflects only the latest successful run."""
        first_client = client_factory(address_offset=0x1000)
        second_client = client_factory(address_offset=0x2000)

        run_pipeline("localhost", empty_env, first_client, deployments_root=deployments_root)
        run_pipeline(
            "localhost",
            empty_env,
            second_client,
            deployments_root=deployments_root,
            clock=lambda: datetime(2025, 1, 1, tzinfo=timezone.utc),
        )

        record = load_deployment_record("localhost", deployments_root)
        assert record.contracts == second_client.confirmed
        assert set(record.contracts.values()).isdisjoint(first_client.confirmed.values())
        assert record.timestamp == "2025-01-01T00:00:00.000Z"

    def test_unwritable_root_is_record_error(self, fake_client, empty_env, tmp_path: Path):
        """Test that a failed record write comes back as a result with the deployed contracts."""
        blocked = tmp_path / "blocked"
        blocked.write_text("not a directory")

        result = run_pipeline("localhost", empty_env, fake_client, deployments_root=blocked)

        assert result.status is PipelineStatus.RECORD_ERROR
        assert isinstance(result.error, RecordWriteError)
        assert result.exit_code == 1
        assert [c.name for c in result.deployed] == ["VotingToken", "VoterRegistry", "ElectionFactory"]

    def test_path_escaping_network_rejected(self, fake_client, empty_env, deployments_root: Path):
        """Test that a network name cannot place the record outside the root."""
        result = run_pipeline("../escape", empty_env, fake_client, deployments_root=deployments_root)

        assert result.status is PipelineStatus.CONFIG_ERROR
        assert isinstance(result.error, InvalidNetworkNameError)
        assert fake_client.calls == []
        assert not (deployments_root.parent / "escape").exists()


class TestChainClientFailures:
    """Malformed node replies come back as typed results."""

    @responses.activate
    def test_non_json_reply_is_chain_error(self, empty_env, artifacts_dir: Path, deployments_root: Path):
        """Test that an HTML page in place of a JSON-RPC reply is a chain error."""
        responses.add(responses.POST, RPC_URL, body="<html>proxy login</html>", status=200)
        client = JsonRpcChainClient(RPC_URL, artifacts_dir=artifacts_dir)

        result = run_pipeline("localhost", empty_env, client, deployments_root=deployments_root)

        assert result.status is PipelineStatus.CHAIN_ERROR
        assert isinstance(result.error, ChainClientError)
        assert not get_record_path("localhost", deployments_root).exists()

    @responses.activate
    def test_unencodable_argument_is_deployment_error(self, empty_env, artifacts_dir: Path, deployments_root: Path):
        """Test that a constructor literal of the wrong type fails that contract's step."""
        responses.add(
            responses.POST,
            RPC_URL,
            json={"jsonrpc": "2.0", "id": 1, "result": [NODE_ACCOUNT]},
        )
        client = JsonRpcChainClient(RPC_URL, artifacts_dir=artifacts_dir)

        result = run_pipeline(
            "localhost",
            empty_env,
            client,
            specs=[contract("VoterRegistry", "eighteen")],
            deployments_root=deployments_root,
        )

        assert result.status is PipelineStatus.DEPLOYMENT_ERROR
        assert result.error.contract_name == "VoterRegistry"
        assert result.error.network == "localhost"
        assert result.deployed == []
