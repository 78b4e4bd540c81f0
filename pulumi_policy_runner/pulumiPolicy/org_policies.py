# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Organization-specific mandatory policies for AWS resources.

- S3 bucket versioning: all buckets must have versioning enabled
- EC2 instance tagging: all instances must have Owner, Environment and CostCenter tags
- RDS encryption: all RDS instances must have storage encryption enabled
"""

from typing import Any, Callable, List

from pulumi_policy import (
    EnforcementLevel,
    ReportViolation,
    ResourceValidationArgs,
    ResourceValidationPolicy,
  )

S3_BUCKET_TYPE = "aws:s3/bucket:Bucket"
EC2_INSTANCE_TYPE = "aws:ec2/instance:Instance"
RDS_INSTANCE_TYPE = "aws:rds/instance:Instance"

REQUIRED_EC2_TAGS: List[str] = [ "Owner", "Environment", "CostCenter" ]
REQUIRED_EC2_INSTANCE_TYPE = "t2.micro"
DISALLOWED_RDS_ENGINE_VERSION = "8.0"

def validate_resource_of_type(
      resource_type: str,
      validate: Callable[[Any, ReportViolation], None],
    ) -> Callable[[ResourceValidationArgs, ReportViolation], None]:
  """Wraps a validator so it only sees resources of one type."""
  def _validate(args: ResourceValidationArgs, report_violation: ReportViolation) -> None:
    if args.resource_type == resource_type:
      validate(args.props, report_violation)
  return _validate

def check_s3_bucket_versioning(props: Any, report_violation: ReportViolation) -> None:
  versioning = props.get("versioning") or {}
  if not versioning.get("enabled"):
    report_violation("S3 buckets must have versioning enabled according to organizational policy.")

def check_ec2_instance_tags(props: Any, report_violation: ReportViolation) -> None:
  tags = props.get("tags") or {}
  if props.get("instanceType") != REQUIRED_EC2_INSTANCE_TYPE:
    report_violation(f"EC2 instances must not be of type '{REQUIRED_EC2_INSTANCE_TYPE}' according to organizational policy.")
  for tag in REQUIRED_EC2_TAGS:
    if not tags.get(tag):
      report_violation(f"EC2 instance must have the '{tag}' tag according to organizational policy.")

def check_rds_encryption(props: Any, report_violation: ReportViolation) -> None:
  if not props.get("storageEncrypted"):
    report_violation("RDS instances must have storage encryption enabled according to organizational policy.")
  if props.get("engineVersion") == DISALLOWED_RDS_ENGINE_VERSION:
    report_violation(f"RDS instances must not be of engine version '{DISALLOWED_RDS_ENGINE_VERSION}' according to organizational policy.")

require_s3_bucket_versioning = ResourceValidationPolicy(
    name="org-require-s3-bucket-versioning",
    description="Ensures all S3 buckets have versioning enabled for data protection and recovery.",
    enforcement_level=EnforcementLevel.MANDATORY,
    validate=validate_resource_of_type(S3_BUCKET_TYPE, check_s3_bucket_versioning),
  )

require_ec2_instance_tags = ResourceValidationPolicy(
    name="org-require-ec2-instance-tags",
    description="Ensures all EC2 instances have required organizational tags.",
    enforcement_level=EnforcementLevel.MANDATORY,
    validate=validate_resource_of_type(EC2_INSTANCE_TYPE, check_ec2_instance_tags),
  )

require_rds_encryption = ResourceValidationPolicy(
    name="org-require-rds-encryption",
    description="Ensures all RDS instances are encrypted at rest.",
    enforcement_level=EnforcementLevel.MANDATORY,
    validate=validate_resource_of_type(RDS_INSTANCE_TYPE, check_rds_encryption),
  )

ORG_POLICIES: List[ResourceValidationPolicy] = [
    require_s3_bucket_versioning,
    require_ec2_instance_tags,
    require_rds_encryption,
  ]
