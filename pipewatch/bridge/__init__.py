"""Bridges to external services.

``codepipeline`` wraps the AWS CodePipeline API behind ``PipelineClient``
so the refresh engine never imports boto3 directly.
"""
