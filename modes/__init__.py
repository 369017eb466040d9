# formula modes package
