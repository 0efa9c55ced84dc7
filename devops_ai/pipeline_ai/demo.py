"""Built-in sample pipelines for ``analyze --demo``."""

from __future__ import annotations

from pipeline_ai.analyzer.models import Platform

DEMO_FILE_NAME = "demo-pipeline.yml"

AZURE_DEVOPS_DEMO = """\
trigger:
  - main

pool:
  vmImage: 'ubuntu-latest'

steps:
  - task: DotNetCoreCLI@2
    displayName: 'Restore packages'
    inputs:
      command: 'restore'
      projects: '**/*.csproj'

  - task: DotNetCoreCLI@2
    displayName: 'Build'
    inputs:
      command: 'build'
      projects: '**/*.csproj'
      arguments: '--configuration Release'

  - script: echo 'Deployment would happen here'
    displayName: 'Deploy placeholder'"""

GITHUB_ACTIONS_DEMO = """\
name: Build and Test

on:
  push:
    branches: [ main ]
  pull_request:
    branches: [ main ]

jobs:
  build:
    runs-on: ubuntu-latest

    steps:
    - uses: actions/checkout@main

    - name: Setup .NET
      uses: actions/setup-dotnet@v3
      with:
        dotnet-version: 9.0.x

    - name: Restore
      run: dotnet restore

    - name: Build
      run: dotnet build --configuration Release"""

_DEMOS = {
    Platform.azure_devops: AZURE_DEVOPS_DEMO,
    Platform.github_actions: GITHUB_ACTIONS_DEMO,
}


def get_demo_yaml(platform: Platform) -> str:
    """Return the sample pipeline for ``platform``."""
    return _DEMOS[platform]
