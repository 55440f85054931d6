"""Built-in detection rules, in evaluation order."""

from __future__ import annotations

from typing import Tuple

from secretguard.severity import Severity

from . import Pattern

DEFAULT_PATTERNS: Tuple[Pattern, ...] = (
    # ------------------------------------------------------------------
    # AWS
    # ------------------------------------------------------------------
    Pattern(
        id="aws-access-key-id",
        name="AWS Access Key ID",
        expression=r"(?:A3T[A-Z0-9]|AKIA|ABIA|ACCA|ASIA)[A-Z0-9]{16}",
        description="AWS Access Key IDs authenticate API requests to AWS services.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Immediately rotate this key in the AWS IAM console\n"
            "2. Check CloudTrail for unauthorized usage\n"
            "3. Remove the key from your code\n"
            "4. Read it from the environment instead: os.environ[\"AWS_ACCESS_KEY_ID\"]\n"
            "5. For production workloads, use IAM roles instead of access keys\n"
            "\n"
            "AWS documentation: https://docs.aws.amazon.com/IAM/latest/UserGuide/id_credentials_access-keys.html"
        ),
    ),
    Pattern(
        id="aws-secret-access-key",
        name="AWS Secret Access Key",
        expression=r"""(?i)(?:aws)?_?secret_?(?:access)?_?key['"]?\s*[:=]\s*['"]?([A-Za-z0-9/+=]{40})['"]?""",
        description="AWS Secret Access Keys are the password component of AWS credentials.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Rotate BOTH the Access Key ID and the Secret Access Key\n"
            "2. Use AWS Secrets Manager or SSM Parameter Store in production\n"
            "3. Consider aws-vault for local development"
        ),
    ),
    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------
    Pattern(
        id="stripe-secret-key",
        name="Stripe Secret Key",
        expression=r"sk_live_[a-zA-Z0-9]{24,}",
        description="Stripe secret keys can process payments and access sensitive customer data.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Roll this key immediately in the Stripe Dashboard (Developers > API keys)\n"
            "2. Check Stripe logs for unauthorized transactions\n"
            "3. Store it in an environment variable such as STRIPE_SECRET_KEY"
        ),
    ),
    Pattern(
        id="stripe-restricted-key",
        name="Stripe Restricted Key",
        expression=r"rk_live_[a-zA-Z0-9]{24,}",
        description="Stripe restricted keys have limited permissions but can still access production data.",
        severity=Severity.HIGH,
        remediation="Roll this key in the Stripe Dashboard and store it in an environment variable.",
    ),
    # ------------------------------------------------------------------
    # Source hosting
    # ------------------------------------------------------------------
    Pattern(
        id="github-pat",
        name="GitHub Personal Access Token",
        expression=r"ghp_[a-zA-Z0-9]{36}",
        description="GitHub Personal Access Tokens can access repositories and perform actions as you.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Revoke it immediately: GitHub > Settings > Developer settings > Personal access tokens\n"
            "2. Check your GitHub security log for unauthorized access\n"
            "3. Create a new token with the minimal required scopes"
        ),
    ),
    Pattern(
        id="github-oauth",
        name="GitHub OAuth Access Token",
        expression=r"gho_[a-zA-Z0-9]{36}",
        description="GitHub OAuth tokens are used for OAuth app authentication.",
        severity=Severity.HIGH,
        remediation="Revoke the OAuth token and investigate the OAuth app that created it.",
    ),
    Pattern(
        id="github-app-token",
        name="GitHub App Token",
        expression=r"(?:ghu|ghs)_[a-zA-Z0-9]{36}",
        description="GitHub App installation or user-to-server tokens.",
        severity=Severity.HIGH,
        remediation="These tokens are usually short-lived. Investigate how it was exposed.",
    ),
    # ------------------------------------------------------------------
    # AI providers
    # ------------------------------------------------------------------
    Pattern(
        id="openai-api-key",
        name="OpenAI API Key",
        expression=r"sk-[a-zA-Z0-9]{48}",
        description="OpenAI API keys grant access to GPT models and can incur usage charges.",
        severity=Severity.HIGH,
        remediation=(
            "1. Rotate the key in the OpenAI dashboard\n"
            "2. Check usage history for unauthorized calls\n"
            "3. Set usage limits on your OpenAI account"
        ),
    ),
    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------
    Pattern(
        id="slack-bot-token",
        name="Slack Bot Token",
        expression=r"xoxb-[0-9]{10,13}-[0-9]{10,13}-[a-zA-Z0-9]{24}",
        description="Slack bot tokens allow applications to act as a bot in Slack workspaces.",
        severity=Severity.HIGH,
        remediation=(
            "1. Regenerate the token in your Slack app settings\n"
            "2. Review the bot's permissions and keep scopes minimal"
        ),
    ),
    Pattern(
        id="slack-webhook",
        name="Slack Webhook URL",
        expression=r"https://hooks\.slack\.com/services/T[A-Z0-9]{8,}/B[A-Z0-9]{8,}/[a-zA-Z0-9]{24}",
        description="Slack webhook URLs can post messages to channels.",
        severity=Severity.MEDIUM,
        remediation="Regenerate the webhook in your Slack app settings.",
    ),
    # ------------------------------------------------------------------
    # Generic
    # ------------------------------------------------------------------
    Pattern(
        id="private-key",
        name="Private Key",
        expression=r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----",
        description="Private keys are used for authentication and encryption.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Consider this key compromised and generate a new key pair\n"
            "2. Remove the old public key from every authorized_keys file\n"
            "3. Use ssh-agent instead of storing SSH keys in project directories"
        ),
    ),
    Pattern(
        id="generic-api-key",
        name="Generic API Key Assignment",
        expression=r"""(?i)(?:api[_-]?key|apikey)['"]?\s*[:=]\s*['"]([a-zA-Z0-9_\-]{20,})['"]?""",
        description="A value assigned to a variable that looks like an API key.",
        severity=Severity.MEDIUM,
        remediation=(
            "1. Identify which service this key belongs to\n"
            "2. Rotate the key with that service\n"
            "3. Use environment variables or a secrets manager"
        ),
    ),
    Pattern(
        id="generic-password",
        name="Password Assignment",
        expression=r"""(?i)(?:password|passwd|pwd)['"]?\s*[:=]\s*['"]([^'"]{8,})['"]""",
        description="A value assigned to a password variable.",
        severity=Severity.HIGH,
        remediation=(
            "1. Change this password immediately\n"
            "2. Check whether the password was reused anywhere else\n"
            "3. Use environment variables or a secrets manager"
        ),
    ),
    Pattern(
        id="connection-string",
        name="Database Connection String",
        expression=(
            r"""(?i)(?:mongodb(?:\+srv)?|postgres(?:ql)?|mysql|redis|amqp)://"""
            r"""[^\s'"<>]+:[^\s'"<>]+@[^\s'"<>]+"""
        ),
        description="Database connection strings often contain credentials.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Change the database password immediately\n"
            "2. Check the database logs for unauthorized access\n"
            "3. Load connection strings from environment variables"
        ),
    ),
    # ------------------------------------------------------------------
    # Cloud providers
    # ------------------------------------------------------------------
    Pattern(
        id="gcp-api-key",
        name="Google Cloud API Key",
        expression=r"AIza[0-9A-Za-z\-_]{35}",
        description="Google Cloud API keys can access various Google services.",
        severity=Severity.HIGH,
        remediation=(
            "1. Delete and recreate the key in the Google Cloud Console\n"
            "2. Add API restrictions to limit which APIs the key can reach"
        ),
    ),
    Pattern(
        id="gcp-service-account",
        name="Google Cloud Service Account Key",
        expression=r'"private_key":\s*"-----BEGIN [A-Z]+ PRIVATE KEY-----',
        description="Google Cloud service account private keys provide full access to GCP resources.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Delete this service account key in the GCP Console\n"
            "2. Use Workload Identity Federation instead of key files"
        ),
    ),
    Pattern(
        id="azure-connection-string",
        name="Azure Storage Connection String",
        expression=r"DefaultEndpointsProtocol=https;AccountName=[^;]+;AccountKey=[A-Za-z0-9+/=]{88};",
        description="Azure Storage connection strings provide full access to storage accounts.",
        severity=Severity.CRITICAL,
        remediation=(
            "1. Rotate the storage account keys in the Azure Portal\n"
            "2. Use a Managed Identity instead of connection strings"
        ),
    ),
)
