"""Test data shared by kustomize-secrets tests."""

DB_PASSWORD_REF = "berglas://my-bucket/db-password"
DB_PASSWORD = "hunter2"

DEPLOYMENT = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: podinfo
  namespace: podinfo
  labels:
    app: podinfo
spec:
  replicas: 2
  selector:
    matchLabels:
      app: podinfo
  strategy:
    type: RollingUpdate
  template:
    metadata:
      creationTimestamp: null
      labels:
        app: podinfo
    spec:
      containers:
      - name: podinfo
        image: ghcr.io/stefanprodan/podinfo:6.3.5
        ports:
        - containerPort: 9898
          protocol: TCP
        env:
        - name: DB_PASSWORD
          value: berglas://my-bucket/db-password
        - name: LOG_LEVEL
          value: info
"""

CONFIG_MAP = """\
apiVersion: v1
kind: ConfigMap
metadata:
  name: podinfo-config
  namespace: podinfo
data:
  DB_PASSWORD: berglas://my-bucket/db-password
"""

CRON_JOB = """\
apiVersion: batch/v1
kind: CronJob
metadata:
  name: backup
  namespace: podinfo
spec:
  schedule: "0 * * * *"
  jobTemplate:
    spec:
      template:
        spec:
          restartPolicy: OnFailure
          containers:
          - name: backup
            image: busybox
            env:
            - name: DB_PASSWORD
              value: berglas://my-bucket/db-password
"""

UNKNOWN_KIND = """\
apiVersion: v1
kind: Foo
metadata:
  name: foo
  namespace: podinfo
spec:
  template:
    spec:
      containers:
      - name: foo
        env:
        - name: DB_PASSWORD
          value: berglas://my-bucket/db-password
"""
