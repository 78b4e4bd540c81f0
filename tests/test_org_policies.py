from types import SimpleNamespace

from pulumi_policy_runner.pulumiPolicy.org_policies import (
    EC2_INSTANCE_TYPE,
    ORG_POLICIES,
    RDS_INSTANCE_TYPE,
    S3_BUCKET_TYPE,
    check_ec2_instance_tags,
    check_rds_encryption,
    check_s3_bucket_versioning,
    validate_resource_of_type,
  )

def collect(check, props):
  violations = []
  check(props, violations.append)
  return violations

def test_policy_names():
  assert [ p.name for p in ORG_POLICIES ] == [
      "org-require-s3-bucket-versioning",
      "org-require-ec2-instance-tags",
      "org-require-rds-encryption",
    ]

def test_s3_bucket_versioning():
  assert collect(check_s3_bucket_versioning, {"versioning": {"enabled": True}}) == []
  assert len(collect(check_s3_bucket_versioning, {})) == 1
  assert len(collect(check_s3_bucket_versioning, {"versioning": {"enabled": False}})) == 1

def test_ec2_instance_tags():
  tags = {"Owner": "ops", "Environment": "dev", "CostCenter": "42"}
  assert collect(check_ec2_instance_tags, {"instanceType": "t2.micro", "tags": tags}) == []
  violations = collect(check_ec2_instance_tags, {"instanceType": "t2.micro", "tags": {"Owner": "ops"}})
  assert len(violations) == 2
  assert any("'Environment'" in v for v in violations)
  assert any("'CostCenter'" in v for v in violations)

def test_ec2_other_instance_type_is_a_violation():
  tags = {"Owner": "ops", "Environment": "dev", "CostCenter": "42"}
  violations = collect(check_ec2_instance_tags, {"instanceType": "t3.large", "tags": tags})
  assert len(violations) == 1
  assert "t2.micro" in violations[0]

def test_rds_encryption():
  assert collect(check_rds_encryption, {"storageEncrypted": True, "engineVersion": "8.0.35"}) == []
  violations = collect(check_rds_encryption, {"storageEncrypted": False, "engineVersion": "8.0"})
  assert len(violations) == 2

def test_validator_ignores_other_resource_types():
  validate = validate_resource_of_type(S3_BUCKET_TYPE, check_s3_bucket_versioning)
  violations = []
  validate(SimpleNamespace(resource_type=EC2_INSTANCE_TYPE, props={}), violations.append)
  assert violations == []
  validate(SimpleNamespace(resource_type=S3_BUCKET_TYPE, props={}), violations.append)
  assert len(violations) == 1

def test_rds_validator_wraps_props():
  validate = validate_resource_of_type(RDS_INSTANCE_TYPE, check_rds_encryption)
  violations = []
  validate(SimpleNamespace(resource_type=RDS_INSTANCE_TYPE, props={"storageEncrypted": True}), violations.append)
  assert violations == []
