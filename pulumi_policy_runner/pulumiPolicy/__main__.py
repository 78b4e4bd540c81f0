# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""AWS compliance policy pack.

Organization-specific policies are mandatory and block deployment.
"""

from pulumi_policy import EnforcementLevel, PolicyPack

# NOTE: pulumi runs this file with the policy pack directory on sys.path
from org_policies import ORG_POLICIES

POLICY_PACK_NAME = "aws-iso27001-compliance-ready-policies"

PolicyPack(
    name=POLICY_PACK_NAME,
    enforcement_level=EnforcementLevel.MANDATORY,
    policies=list(ORG_POLICIES),
  )
